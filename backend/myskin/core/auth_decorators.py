"""
Authentication helpers for this application.

DUAL AUTHENTICATION STRATEGY:

1. **Customers (storefront):**
   - Authentication: Flask-Login session (email + password)
   - Decorator: @login_required (401 JSON via the login manager)
   - Use for: manual bank-transfer checkout, ``/api/auth/me``

2. **Clinic staff (admin back-office):**
   - Authentication: signed JWT in the HTTP-only ``admin-token`` cookie
   - Decorator: @require_admin
   - Use for: every ``/api/admin`` endpoint

Examples:
    @admin_bp.route("/manual-payments/<int:payment_id>", methods=["PATCH"])
    @require_admin
    def review_manual_payment(payment_id):
        reviewer = g.admin["email"]
"""

from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, g, request

from myskin.core.api_utils import api_response
from myskin.core.security import ADMIN_COOKIE_NAME, get_admin_from_token


def get_current_admin() -> Optional[Dict[str, Any]]:
    """Return the admin identity for this request, reading the cookie once."""
    if hasattr(g, "admin"):
        return g.admin
    g.admin = get_admin_from_token(request.cookies.get(ADMIN_COOKIE_NAME))
    return g.admin


def require_admin(f):
    """Decorator for admin back-office endpoints.

    Returns:
        - 401 if the admin cookie is missing, expired or not an admin token
        - Proceeds to the route with ``g.admin`` set otherwise
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_app.config.get("LOGIN_DISABLED", False):
            g.admin = {"id": 0, "email": "test-admin@myskin.local", "role": "admin"}
            return f(*args, **kwargs)

        if get_current_admin() is None:
            return api_response(False, "Admin authentication required", None, 401)
        return f(*args, **kwargs)

    return decorated_function
