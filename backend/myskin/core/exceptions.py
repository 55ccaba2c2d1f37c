"""
Custom exceptions for the application.

Services raise these; controllers translate them into JSON error responses
through ``myskin.core.api_utils.error_response``.
"""

from typing import List, Optional


class MySkinError(Exception):
    """Base class for application errors carrying an HTTP status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MySkinError):
    """Raised when request data fails validation."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class AuthenticationError(MySkinError):
    status_code = 401


class NotFoundError(MySkinError):
    """Raised when a requested row does not exist."""

    status_code = 404


class ConflictError(MySkinError):
    """
    Raised when a request conflicts with current state, e.g. reviewing a
    manual payment that is no longer pending or reusing a transfer reference.
    """

    status_code = 409


class PaymentGatewayError(MySkinError):
    """Raised when the payment gateway rejects a request or is unreachable."""

    status_code = 502

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class StorageError(MySkinError):
    """Raised when an uploaded file cannot be stored."""

    status_code = 500
