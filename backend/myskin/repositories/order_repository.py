import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from myskin.db.base import BankDetails, ManualPayment, Order, OrderItem
from myskin.domain.entities import PaymentStatus
from myskin.repositories.base_repository import BaseRepository, like_pattern

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Repository for orders, their items and attached manual payments."""

    model = Order

    def _with_children(self):
        return self.db.query(Order).options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.manual_payment),
        )

    def get_by_id(self, order_id: str) -> Optional[Order]:
        return self._with_children().filter(Order.id == order_id).first()

    def create_order(self, order: Order) -> Optional[Order]:
        """
        Insert an order together with the items and manual payment attached
        to it in a single commit.

        Returns:
            The persisted order or None if the transaction failed
        """
        try:
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            return order
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Error creating order",
                extra={
                    "context": {
                        "payment_method": order.payment_method,
                        "user_email": order.user_email,
                        "item_count": len(order.items),
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
            return None

    def get_by_paystack_reference(self, reference: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.paystack_reference == reference).first()

    def find_latest_by_email(self, email: str) -> Optional[Order]:
        return (
            self._with_children()
            .filter(func.lower(Order.user_email) == email.strip().lower())
            .order_by(Order.created_at.desc())
            .first()
        )

    def find_latest_by_partial_id(self, fragment: str) -> Optional[Order]:
        return (
            self._with_children()
            .filter(Order.id.ilike(like_pattern(fragment.strip()), escape="\\"))
            .order_by(Order.created_at.desc())
            .first()
        )

    def list_filtered(
        self, search: Optional[str] = None, status: Optional[str] = None
    ) -> List[Order]:
        query = self._with_children()
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    Order.id.ilike(pattern, escape="\\"),
                    Order.user_email.ilike(pattern, escape="\\"),
                    Order.customer_name.ilike(pattern, escape="\\"),
                    Order.customer_phone.ilike(pattern, escape="\\"),
                )
            )
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc()).all()

    def recent(self, limit: int = 5) -> List[Order]:
        return self._with_children().order_by(Order.created_at.desc()).limit(limit).all()


class ManualPaymentRepository(BaseRepository[ManualPayment]):
    """Repository for bank transfer payment records awaiting admin review."""

    model = ManualPayment

    def get_by_id(self, payment_id: int) -> Optional[ManualPayment]:
        return (
            self.db.query(ManualPayment)
            .options(selectinload(ManualPayment.order).selectinload(Order.items))
            .filter(ManualPayment.id == payment_id)
            .first()
        )

    def list_filtered(
        self, search: Optional[str] = None, status: Optional[str] = None
    ) -> List[ManualPayment]:
        """
        List manual payments newest first.

        Args:
            search: Substring matched against sender name, order email,
                customer name and transfer reference
            status: Exact payment_status filter
        """
        query = (
            self.db.query(ManualPayment)
            .join(Order, ManualPayment.order_id == Order.id)
            .options(selectinload(ManualPayment.order).selectinload(Order.items))
        )
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    ManualPayment.sender_name.ilike(pattern, escape="\\"),
                    Order.user_email.ilike(pattern, escape="\\"),
                    ManualPayment.customer_name.ilike(pattern, escape="\\"),
                    ManualPayment.transfer_reference.ilike(pattern, escape="\\"),
                )
            )
        if status:
            query = query.filter(ManualPayment.payment_status == status)
        return query.order_by(ManualPayment.submitted_at.desc(), ManualPayment.id.desc()).all()

    def status_counts(self) -> Dict[str, int]:
        counts = {status: 0 for status in PaymentStatus.ALL}
        rows = (
            self.db.query(ManualPayment.payment_status, func.count(ManualPayment.id))
            .group_by(ManualPayment.payment_status)
            .all()
        )
        for status, total in rows:
            counts[status] = total
        return counts

    def transfer_reference_in_use(self, reference: str) -> bool:
        """True if a pending or approved payment already claims this reference."""
        return (
            self.db.query(ManualPayment.id)
            .filter(
                func.lower(ManualPayment.transfer_reference) == reference.strip().lower(),
                ManualPayment.payment_status != PaymentStatus.REJECTED,
            )
            .first()
            is not None
        )

    def save_review(self, payment: ManualPayment) -> Optional[ManualPayment]:
        """
        Commit the review fields set on ``payment`` and any status change
        made to its order as one transaction.
        """
        try:
            self.db.commit()
            self.db.refresh(payment)
            return payment
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Error saving manual payment review",
                extra={
                    "context": {
                        "payment_id": payment.id,
                        "order_id": payment.order_id,
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
            return None


class BankDetailsRepository(BaseRepository[BankDetails]):
    model = BankDetails

    def get_active(self) -> Optional[BankDetails]:
        return (
            self.db.query(BankDetails)
            .filter(BankDetails.is_active.is_(True))
            .order_by(BankDetails.id.desc())
            .first()
        )

    def replace_active(self, details: BankDetails) -> Optional[BankDetails]:
        """Deactivate the current account and store ``details`` as the active one."""
        try:
            self.db.query(BankDetails).filter(BankDetails.is_active.is_(True)).update(
                {"is_active": False}, synchronize_session=False
            )
            details.is_active = True
            self.db.add(details)
            self.db.commit()
            self.db.refresh(details)
            return details
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Error replacing bank details",
                extra={"context": {"error": str(e)}},
                exc_info=True,
            )
            return None
