"""
Domain entities - pure business values, no framework dependencies.

Status vocabularies for the workflow tables live here so validators,
services and controllers agree on them.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


class PaymentStatus:
    """Manual payment review states: pending -> approved | rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)
    REVIEW_OUTCOMES = (APPROVED, REJECTED)


class OrderStatus:
    PENDING = "pending"
    COMPLETED = "completed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"

    ALL = (PENDING, COMPLETED, SHIPPED, CANCELLED)


class PaymentMethod:
    MANUAL = "manual"
    PAYSTACK = "paystack"

    ALL = (MANUAL, PAYSTACK)


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, COMPLETED, CANCELLED)


class ApplicationStatus:
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"

    ALL = (PENDING, REVIEWED, SHORTLISTED, REJECTED)


@dataclass
class CustomerInfo:
    """Shipping and contact details captured at checkout."""

    email: str = ""
    name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
        }


@dataclass
class CartLine:
    """A cart entry priced from the current catalog."""

    product_id: int
    name: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": float(self.unit_price),
            "quantity": self.quantity,
            "image_url": self.image_url,
            "line_total": float(self.line_total),
        }


@dataclass
class CartSummary:
    lines: List[CartLine] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> Decimal:
        total = sum((line.line_total for line in self.lines), Decimal("0"))
        return total.quantize(Decimal("0.01"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [line.to_dict() for line in self.lines],
            "total_items": self.total_items,
            "total_price": float(self.total_price),
        }
