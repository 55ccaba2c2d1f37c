"""
Common API utilities for consistent response formatting across all controllers.
"""

from typing import Any, Dict, Optional

from flask import jsonify, request

from myskin.core.exceptions import MySkinError, PaymentGatewayError, ValidationError


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response: Dict[str, Any] = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def error_response(exc: MySkinError) -> tuple:
    """Translate an application exception into the standard error payload."""
    data: Optional[Dict[str, Any]] = None
    if isinstance(exc, ValidationError):
        data = {"errors": exc.errors}
    elif isinstance(exc, PaymentGatewayError) and exc.details:
        data = {"details": exc.details}
    return api_response(False, exc.message, data, exc.status_code)


def get_payload() -> Dict[str, Any]:
    """Accept JSON or form-encoded bodies, like the HTML forms and fetch calls do."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()
