"""
Manual payment reconciliation.

A bank-transfer payment starts ``pending`` and is moved once, by an admin,
to ``approved`` or ``rejected``. Approval completes the linked order in the
same commit. The customer is emailed afterwards; a failed email is reported
in the result but never reverts the review.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import ConflictError, MySkinError, NotFoundError, ValidationError
from myskin.db.base import ManualPayment, utcnow
from myskin.domain.entities import OrderStatus, PaymentStatus
from myskin.repositories.order_repository import ManualPaymentRepository
from myskin.schemas.dtos import PaymentReviewRequest
from myskin.services.email_service import EmailNotificationService

logger = logging.getLogger(__name__)


class PaymentReviewService:
    def __init__(self, db: Session, email_service: Optional[EmailNotificationService] = None):
        self.payments = ManualPaymentRepository(db)
        self._email_service = email_service

    @property
    def email_service(self) -> EmailNotificationService:
        if self._email_service is None:
            self._email_service = EmailNotificationService()
        return self._email_service

    def list_payments(
        self, search: Optional[str] = None, status: Optional[str] = None
    ) -> Dict[str, Any]:
        """Return ``{"payments": [...], "counts": {status: n}}`` for the review queue."""
        if status and status not in PaymentStatus.ALL:
            raise ValidationError(
                "Invalid status", [f"status: must be one of: {', '.join(PaymentStatus.ALL)}"]
            )
        payments: List[ManualPayment] = self.payments.list_filtered(search=search, status=status)
        return {"payments": payments, "counts": self.payments.status_counts()}

    def get_payment(self, payment_id: int) -> ManualPayment:
        payment = self.payments.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment

    def review(
        self, payment_id: int, request: PaymentReviewRequest, reviewer: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Approve or reject a pending manual payment.

        Returns:
            ``{"payment", "email_sent", "message"}``

        Raises:
            ValidationError: status is not approved/rejected
            NotFoundError: unknown payment
            ConflictError: payment was already reviewed
        """
        request.validate()
        payment = self.get_payment(payment_id)
        if payment.payment_status != PaymentStatus.PENDING:
            raise ConflictError(f"Payment has already been {payment.payment_status}")

        payment.payment_status = request.status
        payment.admin_notes = request.notes
        payment.reviewed_at = utcnow()
        payment.reviewed_by = request.reviewed_by or reviewer
        if request.status == PaymentStatus.APPROVED and payment.order is not None:
            payment.order.status = OrderStatus.COMPLETED

        saved = self.payments.save_review(payment)
        if saved is None:
            raise MySkinError("Failed to update payment")

        logger.info(
            "Manual payment reviewed",
            extra={
                "context": {
                    "payment_id": saved.id,
                    "order_id": saved.order_id,
                    "status": saved.payment_status,
                    "reviewed_by": saved.reviewed_by,
                }
            },
        )

        email_result = self._notify(saved)
        if email_result["success"]:
            message = f"Payment {saved.payment_status} successfully and email sent"
        else:
            message = (
                f"Payment {saved.payment_status} successfully but email failed: "
                f"{email_result['message']}"
            )
        return {"payment": saved, "email_sent": email_result["success"], "message": message}

    def _notify(self, payment: ManualPayment) -> Dict[str, Any]:
        order = payment.order
        if order is None:
            logger.warning(
                "Reviewed payment has no order, skipping email",
                extra={"context": {"payment_id": payment.id}},
            )
            return {"success": False, "message": "Order not found"}
        if payment.payment_status == PaymentStatus.APPROVED:
            return self.email_service.send_payment_approval(order)
        return self.email_service.send_payment_rejection(order, payment.admin_notes)
