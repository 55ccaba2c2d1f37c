"""
Domain package - pure business values and collaborator contracts.

This package contains:
- entities.py: status vocabularies and cart/checkout value objects
- interfaces.py: payment gateway, email and file storage contracts
"""

from .entities import (
    ApplicationStatus,
    BookingStatus,
    CartLine,
    CartSummary,
    CustomerInfo,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from .interfaces import IEmailSender, IFileStorage, IPaymentGateway

__all__ = [
    "ApplicationStatus",
    "BookingStatus",
    "CartLine",
    "CartSummary",
    "CustomerInfo",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "IEmailSender",
    "IFileStorage",
    "IPaymentGateway",
]
