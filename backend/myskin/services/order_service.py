"""
Checkout and order use-cases.

This service:
- Prices carts from the catalog (client prices are never trusted)
- Starts and verifies online payments through an IPaymentGateway
- Records bank-transfer orders together with their pending ManualPayment
- Answers customer order status lookups and admin order management
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from myskin.core.config import get_public_base_url
from myskin.core.exceptions import ConflictError, MySkinError, NotFoundError, ValidationError
from myskin.core.validation import order_status_validator
from myskin.db.base import BankDetails, ManualPayment, Order, OrderItem
from myskin.domain.entities import (
    CartSummary,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from myskin.domain.interfaces import IPaymentGateway
from myskin.repositories.catalog_repository import ProductRepository
from myskin.repositories.order_repository import (
    BankDetailsRepository,
    ManualPaymentRepository,
    OrderRepository,
)
from myskin.schemas.dtos import CartItemRequest, CheckoutRequest, ManualOrderRequest
from myskin.services.cart_service import price_cart_items
from myskin.services.email_service import EmailNotificationService
from myskin.services.paystack_service import PaystackClient, generate_reference
from myskin.utils.formatting import from_kobo, to_decimal, to_kobo

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/payment/callback"


class OrderService:
    """Application service for checkout and order management."""

    def __init__(
        self,
        db: Session,
        gateway: Optional[IPaymentGateway] = None,
        email_service: Optional[EmailNotificationService] = None,
    ) -> None:
        self.db = db
        self.orders = OrderRepository(db)
        self.payments = ManualPaymentRepository(db)
        self.bank_details = BankDetailsRepository(db)
        self.products = ProductRepository(db)
        self._gateway = gateway
        self._email_service = email_service

    @property
    def gateway(self) -> IPaymentGateway:
        if self._gateway is None:
            self._gateway = PaystackClient()
        return self._gateway

    @property
    def email_service(self) -> EmailNotificationService:
        if self._email_service is None:
            self._email_service = EmailNotificationService()
        return self._email_service

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def price_lines(self, items: List[CartItemRequest]) -> CartSummary:
        """
        Price requested cart lines from the active catalog.

        Raises:
            ValidationError: If the cart is empty or names a product that is
                unknown or no longer sold
        """
        if not items:
            raise ValidationError("Cart is empty", ["cartItems: cart is empty"])
        missing: List[int] = []
        summary = price_cart_items(items, self.products, missing)
        if missing:
            raise ValidationError(
                "Some products in your cart are no longer available",
                [f"cartItems: product {product_id} is not available" for product_id in missing],
            )
        return summary

    # ------------------------------------------------------------------
    # Online payments
    # ------------------------------------------------------------------

    def initialize_online_payment(
        self, request: CheckoutRequest, session_items: Optional[List[CartItemRequest]] = None
    ) -> Dict[str, Any]:
        """Start a hosted gateway checkout for the cart.

        Returns:
            ``{"authorization_url", "access_code", "reference"}``
        """
        request.validate()
        items = request.cart_items if request.cart_items_supplied else (session_items or [])
        summary = self.price_lines(items)

        reference = request.reference or generate_reference()
        metadata = {
            "cart_items": [line.to_dict() for line in summary.lines],
            "customer_info": request.customer.to_dict(),
            "total_items": summary.total_items,
        }
        data = self.gateway.initialize_transaction(
            email=request.customer.email,
            amount_kobo=to_kobo(summary.total_price),
            reference=reference,
            metadata=metadata,
            callback_url=f"{get_public_base_url()}{CALLBACK_PATH}",
        )

        logger.info(
            "Online payment initialized",
            extra={
                "context": {
                    "reference": reference,
                    "total": str(summary.total_price),
                    "items": summary.total_items,
                }
            },
        )
        return {
            "authorization_url": data.get("authorization_url"),
            "access_code": data.get("access_code"),
            "reference": data.get("reference") or reference,
        }

    def verify_online_payment(self, reference: str) -> Dict[str, Any]:
        """
        Verify a gateway transaction and record the order once.

        An order is created only for a successful transaction whose reference
        has no order yet. A failure to write the order is logged but does not
        turn a successful payment into an error for the customer.
        """
        reference = (reference or "").strip()
        if not reference:
            raise ValidationError("Payment reference is required")

        data = self.gateway.verify_transaction(reference)
        status = data.get("status")
        result: Dict[str, Any] = {
            "verified": status == "success",
            "status": status,
            "reference": reference,
            "amount": float(from_kobo(data.get("amount"))),
            "order_id": None,
            "order_created": False,
        }
        if status != "success":
            logger.info(
                "Payment not successful",
                extra={"context": {"reference": reference, "status": status}},
            )
            return result

        existing = self.orders.get_by_paystack_reference(reference)
        if existing is not None:
            logger.info(
                "Order already recorded for payment reference",
                extra={"context": {"reference": reference, "order_id": existing.id}},
            )
            result["order_id"] = existing.id
            return result

        order = self._build_gateway_order(reference, data)
        created = self.orders.create_order(order)
        if created is None:
            logger.error(
                "Payment verified but order could not be saved",
                extra={"context": {"reference": reference}},
            )
            return result

        logger.info(
            "Order created from verified payment",
            extra={"context": {"reference": reference, "order_id": created.id}},
        )
        result["order_id"] = created.id
        result["order_created"] = True
        return result

    def _build_gateway_order(self, reference: str, data: Dict[str, Any]) -> Order:
        metadata = data.get("metadata") or {}
        if isinstance(metadata, str):
            try:
                metadata = json.loads(metadata)
            except ValueError:
                logger.warning(
                    "Unreadable payment metadata",
                    extra={"context": {"reference": reference}},
                )
                metadata = {}

        customer_info = metadata.get("customer_info") or {}
        gateway_customer = data.get("customer") or {}
        order = Order(
            user_email=customer_info.get("email") or gateway_customer.get("email") or "",
            customer_name=customer_info.get("name"),
            customer_phone=customer_info.get("phone"),
            customer_address=customer_info.get("address"),
            customer_city=customer_info.get("city"),
            customer_state=customer_info.get("state"),
            total_amount=from_kobo(data.get("amount")),
            payment_method=PaymentMethod.PAYSTACK,
            status=OrderStatus.COMPLETED,
            paystack_reference=reference,
            shipping_address=customer_info or None,
        )

        for entry in metadata.get("cart_items") or []:
            if not isinstance(entry, dict):
                continue
            product_id = entry.get("id")
            product = self.products.get_by_id(int(product_id)) if str(product_id).isdigit() else None
            order.items.append(
                OrderItem(
                    product_id=product.id if product else None,
                    product_name=entry.get("name") or (product.name if product else None),
                    quantity=int(entry.get("quantity") or 1),
                    price=to_decimal(entry.get("price")),
                )
            )
        return order

    # ------------------------------------------------------------------
    # Manual (bank transfer) orders
    # ------------------------------------------------------------------

    def create_manual_order(
        self, request: ManualOrderRequest, session_items: Optional[List[CartItemRequest]] = None
    ) -> Order:
        """
        Record a bank-transfer order awaiting admin review.

        Business Rules:
        - Lines are priced from the catalog
        - The displayed total, when sent, and the amount paid must both equal
          the computed total
        - A transfer reference cannot back two live (non-rejected) payments
        - Order, items and payment are committed together
        """
        request.validate()
        items = request.cart_items if request.cart_items_supplied else (session_items or [])
        summary = self.price_lines(items)
        total = summary.total_price

        if request.total_amount is not None and request.total_amount != total:
            raise ValidationError(
                "Order total does not match cart total",
                [f"totalAmount: expected {total}, got {request.total_amount}"],
            )
        if request.amount_paid != total:
            raise ValidationError(
                "Amount paid must equal the order total",
                [f"paymentDetails.amountPaid: expected {total}, got {request.amount_paid}"],
            )
        if self.payments.transfer_reference_in_use(request.transfer_reference):
            raise ConflictError("This transfer reference has already been submitted")

        customer = request.customer
        order = Order(
            user_email=customer.email,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_address=customer.address,
            customer_city=customer.city,
            customer_state=customer.state,
            total_amount=total,
            payment_method=PaymentMethod.MANUAL,
            status=OrderStatus.PENDING,
            shipping_address=customer.to_dict(),
        )
        for line in summary.lines:
            order.items.append(
                OrderItem(
                    product_id=line.product_id,
                    product_name=line.name,
                    quantity=line.quantity,
                    price=line.unit_price,
                )
            )
        order.manual_payment = ManualPayment(
            sender_name=request.sender_name,
            customer_email=customer.email,
            customer_name=customer.name,
            amount_paid=request.amount_paid,
            transfer_reference=request.transfer_reference,
            bank_name=request.bank_name,
            payment_status=PaymentStatus.PENDING,
        )

        created = self.orders.create_order(order)
        if created is None:
            raise MySkinError("Failed to create order")

        logger.info(
            "Manual order submitted",
            extra={
                "context": {
                    "order_id": created.id,
                    "total": str(total),
                    "transfer_reference": request.transfer_reference,
                }
            },
        )
        return created

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup_order_status(self, query: Optional[str]) -> Order:
        """Find the most recent order by customer email or order id fragment."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Order ID or email is required", ["query: is required"])

        if "@" in query:
            order = self.orders.find_latest_by_email(query)
        else:
            order = self.orders.find_latest_by_partial_id(query)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def get_bank_details(self) -> BankDetails:
        details = self.bank_details.get_active()
        if details is None:
            raise NotFoundError("Bank details are not configured")
        return details

    def save_bank_details(self, payload: Dict[str, Any]) -> BankDetails:
        errors = [
            f"{name}: is required"
            for name in ("bank_name", "account_name", "account_number")
            if not str(payload.get(name) or "").strip()
        ]
        if errors:
            raise ValidationError("Invalid bank details", errors)

        details = self.bank_details.replace_active(
            BankDetails(
                bank_name=str(payload["bank_name"]).strip(),
                account_name=str(payload["account_name"]).strip(),
                account_number=str(payload["account_number"]).strip(),
            )
        )
        if details is None:
            raise MySkinError("Failed to save bank details")
        return details

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def list_orders(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Order]:
        if status and status not in OrderStatus.ALL:
            raise ValidationError(
                "Invalid status", [f"status: must be one of: {', '.join(OrderStatus.ALL)}"]
            )
        return self.orders.list_filtered(search=search, status=status)

    def get_order(self, order_id: str) -> Order:
        order = self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def update_order_status(
        self, order_id: str, payload: Dict[str, Any]
    ) -> Tuple[Order, Optional[Dict[str, Any]]]:
        """
        Change an order's status and notify the customer.

        Returns:
            The updated order and the email result (None when the status
            did not change)
        """
        status = order_status_validator().validate(payload).raise_if_invalid("Invalid status")["status"]
        order = self.get_order(order_id)
        previous = order.status

        updated = self.orders.update(order.id, {"status": status})
        if updated is None:
            raise MySkinError("Failed to update order")

        logger.info(
            "Order status updated",
            extra={"context": {"order_id": order.id, "from": previous, "to": status}},
        )
        if previous == status:
            return updated, None
        return updated, self.email_service.send_order_status_update(updated, status)

    def delete_order(self, order_id: str) -> None:
        order = self.get_order(order_id)
        if not self.orders.delete(order.id):
            raise MySkinError("Failed to delete order")
        logger.info("Order deleted", extra={"context": {"order_id": order_id}})

