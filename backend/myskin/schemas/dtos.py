"""
Data Transfer Objects (DTOs) for the checkout and payment review contracts.

Each request DTO is built from the raw JSON payload with ``from_payload``
and checked with ``validate()``, which raises ``ValidationError`` carrying
every problem found so the client can show them together.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from myskin.core.exceptions import ValidationError
from myskin.core.validation import (
    BaseValidator,
    CustomerDetailsValidator,
    ManualPaymentDetailsValidator,
    ValidationResult,
)
from myskin.domain.entities import CustomerInfo, PaymentStatus

MAX_LINE_QUANTITY = 99


@dataclass
class CartItemRequest:
    """One ``{id, quantity}`` entry of a submitted cart. Client prices are ignored."""

    product_id: int
    quantity: int


def parse_cart_items(raw: Any, result: ValidationResult) -> List[CartItemRequest]:
    """Parse a submitted ``cartItems`` list, merging duplicate product ids."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        result.add_error("must be a list", "cartItems")
        return []

    merged: Dict[int, int] = {}
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            result.add_error("must be an object", f"cartItems[{index}]")
            continue
        product_id = BaseValidator.validate_integer(
            entry.get("id", entry.get("product_id")), f"cartItems[{index}].id", result, min_value=1
        )
        quantity = BaseValidator.validate_integer(
            entry.get("quantity", 1),
            f"cartItems[{index}].quantity",
            result,
            min_value=1,
            max_value=MAX_LINE_QUANTITY,
        )
        if product_id is None or quantity is None:
            continue
        merged[product_id] = min(MAX_LINE_QUANTITY, merged.get(product_id, 0) + quantity)

    return [CartItemRequest(product_id=pid, quantity=qty) for pid, qty in merged.items()]


@dataclass
class CheckoutRequest:
    """DTO for online (gateway) checkout initialization."""

    customer: CustomerInfo
    cart_items: List[CartItemRequest] = field(default_factory=list)
    reference: Optional[str] = None
    cart_items_supplied: bool = False
    _errors: List[str] = field(default_factory=list, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CheckoutRequest":
        result = ValidationResult()
        customer_raw = payload.get("customerInfo") or payload.get("customerDetails") or {}
        if not isinstance(customer_raw, dict):
            result.add_error("must be an object", "customerInfo")
            customer_raw = {}
        customer_result = CustomerDetailsValidator(require_email=True).validate(customer_raw)
        result.errors.extend(customer_result.errors)
        items = parse_cart_items(payload.get("cartItems"), result)
        reference = payload.get("reference")
        return cls(
            customer=CustomerInfo(**customer_result.cleaned_data),
            cart_items=items,
            reference=str(reference).strip() if reference else None,
            cart_items_supplied="cartItems" in payload,
            _errors=result.errors,
        )

    def validate(self) -> None:
        if self._errors:
            raise ValidationError("Invalid checkout details", list(self._errors))


@dataclass
class ManualOrderRequest:
    """DTO for a bank-transfer order submission.

    ``total_amount`` is the total the client displayed; it must match the
    server-side total computed from catalog prices, as must ``amount_paid``.
    """

    customer: CustomerInfo
    sender_name: str = ""
    amount_paid: Decimal = Decimal("0")
    transfer_reference: str = ""
    bank_name: str = ""
    cart_items: List[CartItemRequest] = field(default_factory=list)
    total_amount: Optional[Decimal] = None
    cart_items_supplied: bool = False
    _errors: List[str] = field(default_factory=list, repr=False)

    @classmethod
    def from_payload(
        cls, payload: Dict[str, Any], fallback_email: Optional[str] = None
    ) -> "ManualOrderRequest":
        result = ValidationResult()

        customer_raw = payload.get("customerDetails") or {}
        if not isinstance(customer_raw, dict):
            result.add_error("must be an object", "customerDetails")
            customer_raw = {}
        customer_raw = dict(customer_raw)
        if not customer_raw.get("email") and fallback_email:
            customer_raw["email"] = fallback_email
        customer_result = CustomerDetailsValidator(require_email=True).validate(customer_raw)
        result.errors.extend(customer_result.errors)

        payment_raw = payload.get("paymentDetails") or {}
        if not isinstance(payment_raw, dict):
            result.add_error("must be an object", "paymentDetails")
            payment_raw = {}
        payment_result = ManualPaymentDetailsValidator().validate(payment_raw)
        result.errors.extend(payment_result.errors)

        total = BaseValidator.validate_decimal(
            payload.get("totalAmount"), "totalAmount", result, min_value=Decimal("0")
        )
        items = parse_cart_items(payload.get("cartItems"), result)

        cleaned = payment_result.cleaned_data
        return cls(
            customer=CustomerInfo(**customer_result.cleaned_data),
            sender_name=cleaned.get("sender_name", ""),
            amount_paid=cleaned.get("amount_paid", Decimal("0")),
            transfer_reference=cleaned.get("transfer_reference", ""),
            bank_name=cleaned.get("bank_name", ""),
            cart_items=items,
            total_amount=total,
            cart_items_supplied="cartItems" in payload,
            _errors=result.errors,
        )

    def validate(self) -> None:
        if self._errors:
            raise ValidationError("Invalid order details", list(self._errors))


@dataclass
class PaymentReviewRequest:
    """DTO for an admin approving or rejecting a manual payment."""

    status: str
    notes: Optional[str] = None
    reviewed_by: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PaymentReviewRequest":
        notes = payload.get("notes")
        return cls(
            status=str(payload.get("status") or "").strip().lower(),
            notes=str(notes).strip() if notes else None,
            reviewed_by=(str(payload.get("reviewedBy")).strip() or None)
            if payload.get("reviewedBy")
            else None,
        )

    def validate(self) -> None:
        if self.status not in PaymentStatus.REVIEW_OUTCOMES:
            raise ValidationError(
                "Invalid status",
                [f"status: must be one of: {', '.join(PaymentStatus.REVIEW_OUTCOMES)}"],
            )
