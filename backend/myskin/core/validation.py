"""
Common validation utilities for controllers and services.

This module provides consistent validation patterns for every form the
storefront and admin back-office submit. Validators collect all errors
into a ``ValidationResult`` instead of stopping at the first one, so the
client can highlight every missing field at once.
"""

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

from myskin.core.exceptions import ValidationError
from myskin.domain.entities import ApplicationStatus, BookingStatus, OrderStatus

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.warning(f"Validation error: {error_msg}")

    def raise_if_invalid(self, message: str = "Validation failed") -> Dict[str, Any]:
        """Raise ValidationError with every collected error, else return cleaned data."""
        if not self.is_valid:
            raise ValidationError(message, list(self.errors))
        return self.cleaned_data


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific entity type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error("is required", field_name)
            return False
        return True

    @staticmethod
    def validate_email(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[str]:
        """Validate and normalize an email address (lowercased, trimmed)."""
        if value is None or value == "":
            return None
        email = str(value).strip().lower()
        if not EMAIL_RE.match(email):
            result.add_error("must be a valid email address", field_name)
            return None
        return email

    @staticmethod
    def validate_date(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[date]:
        """Validate and convert a YYYY-MM-DD date field."""
        if value is None or value == "":
            return None

        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), "%Y-%m-%d").date()
            except ValueError:
                result.add_error("invalid date, use YYYY-MM-DD", field_name)
                return None

        result.add_error("invalid date format", field_name)
        return None

    @staticmethod
    def validate_decimal(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[Decimal] = None,
        max_value: Optional[Decimal] = None,
    ) -> Optional[Decimal]:
        """Validate and convert decimal field (accepts ``1,234.50`` style input)."""
        if value is None or value == "":
            return None

        if isinstance(value, Decimal):
            decimal_value = value
        else:
            try:
                if isinstance(value, str):
                    value = value.strip().replace(" ", "").replace(",", "")
                decimal_value = Decimal(str(value))
            except (InvalidOperation, TypeError, ValueError):
                result.add_error("must be a number", field_name)
                return None

        if not decimal_value.is_finite():
            result.add_error("must be a number", field_name)
            return None

        if min_value is not None and decimal_value < min_value:
            result.add_error(f"must be at least {min_value}", field_name)
            return None

        if max_value is not None and decimal_value > max_value:
            result.add_error(f"must be at most {max_value}", field_name)
            return None

        return decimal_value.quantize(Decimal("0.01"))

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool):
            result.add_error("must be a whole number", field_name)
            return None

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            result.add_error("must be a whole number", field_name)
            return None

        if min_value is not None and int_value < min_value:
            result.add_error(f"must be at least {min_value}", field_name)
            return None

        if max_value is not None and int_value > max_value:
            result.add_error(f"must be at most {max_value}", field_name)
            return None

        return int_value

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        allowed_values: Optional[Sequence[str]] = None,
    ) -> Optional[str]:
        """Validate string field."""
        if value is None:
            return None

        if not isinstance(value, str):
            value = str(value)

        value = value.strip()

        if min_length is not None and len(value) < min_length:
            result.add_error(f"must have at least {min_length} characters", field_name)
            return None

        if max_length is not None and len(value) > max_length:
            result.add_error(f"must have at most {max_length} characters", field_name)
            return None

        if allowed_values is not None and value not in allowed_values:
            result.add_error(f"must be one of: {', '.join(allowed_values)}", field_name)
            return None

        return value if value else None

    @staticmethod
    def validate_boolean(value: Any, default: bool = False) -> bool:
        """Interpret checkbox/JSON booleans (``on``, ``true``, ``1``)."""
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("true", "1", "yes", "on")

    def require_all(
        self, data: Dict[str, Any], fields: Sequence[str], result: ValidationResult
    ) -> None:
        for name in fields:
            self.validate_required_field(data.get(name), name, result)

    def copy_strings(
        self,
        data: Dict[str, Any],
        fields: Sequence[str],
        result: ValidationResult,
        max_length: int = 255,
    ) -> None:
        for name in fields:
            value = self.validate_string(data.get(name), name, result, max_length=max_length)
            if value is not None:
                result.cleaned_data[name] = value


class CustomerDetailsValidator(BaseValidator):
    """Validator for checkout shipping/contact details."""

    REQUIRED = ("name", "phone", "address", "city", "state")

    def __init__(self, require_email: bool = True):
        self.require_email = require_email

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if self.require_email:
            self.validate_required_field(data.get("email"), "email", result)
        self.require_all(data, self.REQUIRED, result)

        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email
        self.copy_strings(data, ("name", "phone", "city", "state"), result, 100)
        self.copy_strings(data, ("address",), result, 500)
        return result


class ManualPaymentDetailsValidator(BaseValidator):
    """Validator for the bank transfer details a customer submits."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(
            data,
            ("senderName", "amountPaid", "transferReference", "bankName"),
            result,
        )
        amount = self.validate_decimal(
            data.get("amountPaid"), "amountPaid", result, min_value=Decimal("0.01")
        )
        if amount is not None:
            result.cleaned_data["amount_paid"] = amount

        for source, target, max_length in (
            ("senderName", "sender_name", 150),
            ("transferReference", "transfer_reference", 100),
            ("bankName", "bank_name", 100),
        ):
            value = self.validate_string(data.get(source), source, result, max_length=max_length)
            if value is not None:
                result.cleaned_data[target] = value
        return result


class BookingValidator(BaseValidator):
    """Validator for appointment booking requests."""

    REQUIRED = (
        "name",
        "email",
        "phone",
        "treatment_type",
        "preferred_date",
        "preferred_time",
    )

    def __init__(self, partial: bool = False):
        self.partial = partial

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if not self.partial:
            self.require_all(data, self.REQUIRED, result)

        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email

        self.copy_strings(data, ("name", "phone", "treatment_type", "preferred_time"), result, 100)

        preferred_date = self.validate_date(data.get("preferred_date"), "preferred_date", result)
        if preferred_date is not None:
            result.cleaned_data["preferred_date"] = preferred_date

        if "notes" in data:
            result.cleaned_data["notes"] = self.validate_string(
                data.get("notes"), "notes", result, max_length=2000
            )

        if data.get("status"):
            status = self.validate_string(
                data.get("status"), "status", result, allowed_values=BookingStatus.ALL
            )
            if status:
                result.cleaned_data["status"] = status
        return result


class ContactValidator(BaseValidator):
    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(data, ("name", "email", "message"), result)
        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email
        self.copy_strings(data, ("name", "phone", "subject"), result, 150)
        self.copy_strings(data, ("message",), result, 5000)
        return result


class PricelistRequestValidator(BaseValidator):
    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(data, ("name", "email", "phone", "address"), result)
        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email
        self.copy_strings(data, ("name", "phone"), result, 100)
        self.copy_strings(data, ("address",), result, 500)
        return result


class JobListingValidator(BaseValidator):
    """Validator for admin job listing create/update."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(data, ("title", "type", "location"), result)
        self.copy_strings(data, ("title", "type", "location"), result, 150)

        requirements = data.get("requirements")
        if isinstance(requirements, str):
            requirements = [part.strip() for part in requirements.split(",")]
        if isinstance(requirements, list):
            requirements = [str(item).strip() for item in requirements if str(item).strip()]
        if not requirements:
            result.add_error("is required", "requirements")
        else:
            result.cleaned_data["requirements"] = requirements

        if "is_active" in data:
            result.cleaned_data["is_active"] = self.validate_boolean(data.get("is_active"), True)
        return result


class JobApplicationValidator(BaseValidator):
    REQUIRED = ("position", "full_name", "email", "phone")

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(data, self.REQUIRED, result)
        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email
        self.copy_strings(data, ("position", "position_type", "location", "full_name", "phone"), result, 150)
        self.copy_strings(data, ("cover_letter",), result, 10000)
        return result


class StatusValidator(BaseValidator):
    """Validator for a bare ``{"status": ...}`` update."""

    def __init__(self, allowed: Sequence[str]):
        self.allowed = allowed

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if self.validate_required_field(data.get("status"), "status", result):
            status = self.validate_string(
                data.get("status"), "status", result, allowed_values=self.allowed
            )
            if status:
                result.cleaned_data["status"] = status
        return result


def application_status_validator() -> StatusValidator:
    return StatusValidator(ApplicationStatus.ALL)


def order_status_validator() -> StatusValidator:
    return StatusValidator(OrderStatus.ALL)


class ProductValidator(BaseValidator):
    """Validator for admin product create/update."""

    def __init__(self, partial: bool = False):
        self.partial = partial

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if not self.partial:
            self.require_all(data, ("name", "price", "category_id"), result)

        self.copy_strings(data, ("name",), result, 200)
        for name in ("description", "ingredients", "image_url"):
            if name in data:
                result.cleaned_data[name] = self.validate_string(
                    data.get(name), name, result, max_length=5000
                )

        price = self.validate_decimal(data.get("price"), "price", result, min_value=Decimal("0"))
        if price is not None:
            result.cleaned_data["price"] = price

        category_id = self.validate_integer(data.get("category_id"), "category_id", result, min_value=1)
        if category_id is not None:
            result.cleaned_data["category_id"] = category_id

        if "brand_id" in data:
            result.cleaned_data["brand_id"] = self.validate_integer(
                data.get("brand_id"), "brand_id", result, min_value=1
            )

        stock = self.validate_integer(data.get("stock_quantity"), "stock_quantity", result, min_value=0)
        if stock is not None:
            result.cleaned_data["stock_quantity"] = stock

        if "is_active" in data:
            result.cleaned_data["is_active"] = self.validate_boolean(data.get("is_active"), True)
        return result


class TreatmentValidator(BaseValidator):
    def __init__(self, partial: bool = False):
        self.partial = partial

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if not self.partial:
            self.require_all(data, ("name", "category"), result)
        self.copy_strings(data, ("name", "category"), result, 150)
        for name in ("description", "image_url"):
            if name in data:
                result.cleaned_data[name] = self.validate_string(
                    data.get(name), name, result, max_length=5000
                )
        duration = self.validate_integer(data.get("duration"), "duration", result, min_value=0)
        if duration is not None:
            result.cleaned_data["duration"] = duration
        if "is_active" in data:
            result.cleaned_data["is_active"] = self.validate_boolean(data.get("is_active"), True)

        if "product_ids" in data:
            ids = data.get("product_ids") or []
            cleaned: List[int] = []
            if not isinstance(ids, list):
                result.add_error("must be a list", "product_ids")
            else:
                for raw in ids:
                    value = self.validate_integer(raw, "product_ids", result, min_value=1)
                    if value is not None and value not in cleaned:
                        cleaned.append(value)
            result.cleaned_data["product_ids"] = cleaned
        return result


class BlogPostValidator(BaseValidator):
    def __init__(self, partial: bool = False):
        self.partial = partial

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if not self.partial:
            self.require_all(data, ("title", "content", "excerpt"), result)
        self.copy_strings(data, ("title", "slug"), result, 255)
        self.copy_strings(data, ("excerpt",), result, 1000)
        self.copy_strings(data, ("content",), result, 100000)
        if "image_url" in data:
            result.cleaned_data["image_url"] = self.validate_string(
                data.get("image_url"), "image_url", result, max_length=500
            )
        if "is_published" in data:
            result.cleaned_data["is_published"] = self.validate_boolean(data.get("is_published"))
        return result


class SignupValidator(BaseValidator):
    MIN_PASSWORD_LENGTH = 8

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        self.require_all(data, ("email", "full_name", "password"), result)
        email = self.validate_email(data.get("email"), "email", result)
        if email:
            result.cleaned_data["email"] = email
        self.copy_strings(data, ("full_name",), result, 150)
        password = data.get("password") or ""
        if password and len(password) < self.MIN_PASSWORD_LENGTH:
            result.add_error(
                f"must have at least {self.MIN_PASSWORD_LENGTH} characters", "password"
            )
        elif password:
            result.cleaned_data["password"] = password
        return result
