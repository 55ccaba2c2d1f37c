"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the checkout and payment review
API contracts.
"""

from .dtos import (
    CartItemRequest,
    CheckoutRequest,
    ManualOrderRequest,
    PaymentReviewRequest,
)

__all__ = [
    "CartItemRequest",
    "CheckoutRequest",
    "ManualOrderRequest",
    "PaymentReviewRequest",
]
