"""
Unit tests for request DTOs and validators.

Validators collect every problem so the client can display them together.
"""

from decimal import Decimal

import pytest

from myskin.core.exceptions import ValidationError
from myskin.core.validation import BaseValidator, BookingValidator, ValidationResult
from myskin.schemas.dtos import (
    CheckoutRequest,
    ManualOrderRequest,
    PaymentReviewRequest,
    parse_cart_items,
)


def _manual_payload(customer_details, **overrides):
    payload = {
        "customerDetails": customer_details,
        "paymentDetails": {
            "senderName": "Ada Obi",
            "amountPaid": "5,000.00",
            "transferReference": "TRF-001",
            "bankName": "GTBank",
        },
        "cartItems": [{"id": 1, "quantity": 1}],
        "totalAmount": 5000,
    }
    payload.update(overrides)
    return payload


class TestParseCartItems:
    def test_merges_duplicate_product_ids(self):
        result = ValidationResult()
        items = parse_cart_items(
            [{"id": 3, "quantity": 1}, {"id": "3", "quantity": 2}, {"id": 4}], result
        )
        assert result.is_valid
        assert [(i.product_id, i.quantity) for i in items] == [(3, 3), (4, 1)]

    def test_rejects_non_list(self):
        result = ValidationResult()
        assert parse_cart_items("1,2", result) == []
        assert result.errors == ["cartItems: must be a list"]

    def test_rejects_bad_quantity(self):
        result = ValidationResult()
        parse_cart_items([{"id": 1, "quantity": 0}], result)
        assert not result.is_valid


class TestManualOrderRequest:
    def test_parses_amounts_and_normalizes_email(self, customer_details):
        details = dict(customer_details, email="  ADA@Example.com ")
        request = ManualOrderRequest.from_payload(_manual_payload(details))
        request.validate()

        assert request.customer.email == "ada@example.com"
        assert request.amount_paid == Decimal("5000.00")
        assert request.total_amount == Decimal("5000")
        assert request.transfer_reference == "TRF-001"

    def test_falls_back_to_signed_in_email(self, customer_details):
        details = {k: v for k, v in customer_details.items() if k != "email"}
        request = ManualOrderRequest.from_payload(
            _manual_payload(details), fallback_email="ada@example.com"
        )
        request.validate()
        assert request.customer.email == "ada@example.com"

    def test_collects_all_missing_fields(self):
        request = ManualOrderRequest.from_payload({"customerDetails": {}, "paymentDetails": {}})
        with pytest.raises(ValidationError) as exc_info:
            request.validate()
        errors = exc_info.value.errors
        assert "email: is required" in errors
        assert "senderName: is required" in errors
        assert "transferReference: is required" in errors

    def test_cart_items_supplied_flag(self, customer_details):
        payload = _manual_payload(customer_details)
        del payload["cartItems"]
        assert ManualOrderRequest.from_payload(payload).cart_items_supplied is False


class TestCheckoutRequest:
    def test_requires_customer_email(self, customer_details):
        details = dict(customer_details, email="not-an-email")
        request = CheckoutRequest.from_payload({"customerInfo": details})
        with pytest.raises(ValidationError) as exc_info:
            request.validate()
        assert "email: must be a valid email address" in exc_info.value.errors


class TestPaymentReviewRequest:
    def test_only_review_outcomes_are_accepted(self):
        with pytest.raises(ValidationError):
            PaymentReviewRequest.from_payload({"status": "pending"}).validate()

    def test_status_is_normalized(self):
        request = PaymentReviewRequest.from_payload({"status": " Approved ", "notes": " ok "})
        request.validate()
        assert request.status == "approved"
        assert request.notes == "ok"


class TestBookingValidator:
    def test_invalid_date_reported(self):
        result = BookingValidator().validate(
            {
                "name": "Ada",
                "email": "ada@example.com",
                "phone": "080",
                "treatment_type": "facial",
                "preferred_date": "31/12/2025",
                "preferred_time": "10:00",
            }
        )
        assert "preferred_date: invalid date, use YYYY-MM-DD" in result.errors

    def test_required_field_helper(self):
        result = ValidationResult()
        assert BaseValidator.validate_required_field("  ", "name", result) is False
        assert result.errors == ["name: is required"]
