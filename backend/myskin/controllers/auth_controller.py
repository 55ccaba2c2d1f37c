"""
Auth controller - admin cookie login and storefront customer accounts.

Admins get a 24 h JWT in the HTTP-only ``admin-token`` cookie; customers
use the Flask-Login session.
"""

import logging

from flask import Blueprint, current_app, jsonify, make_response
from flask_login import current_user, login_required, login_user, logout_user

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.auth_decorators import get_current_admin
from myskin.core.exceptions import MySkinError
from myskin.core.limiter_config import AUTH_LIMIT, limiter
from myskin.core.security import (
    ADMIN_COOKIE_NAME,
    JWT_EXPIRATION_HOURS,
    create_admin_token,
)
from myskin.db.session import SessionLocal
from myskin.services.auth_service import AuthService
from myskin.services.serializers import serialize_customer

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _set_admin_cookie(response, token: str, max_age: int) -> None:
    # Use global cookie config for secure flag (production vs development)
    secure_flag = current_app.config.get("SESSION_COOKIE_SECURE", False)
    response.set_cookie(
        ADMIN_COOKIE_NAME,
        token,
        max_age=max_age,
        httponly=True,
        secure=secure_flag,
        samesite="Strict",
    )


# ------------------- ADMIN -------------------
@auth_bp.route("/custom-admin-auth", methods=["POST"])
@limiter.limit(AUTH_LIMIT)
def admin_login():
    """Expected JSON: ``{"email": str, "password": str}``."""
    db = SessionLocal()
    try:
        admin = AuthService(db).authenticate_admin(get_payload())
        token = create_admin_token(admin.id, admin.email)

        response = make_response(
            jsonify({"success": True, "user": {"id": admin.id, "email": admin.email}})
        )
        _set_admin_cookie(response, token, JWT_EXPIRATION_HOURS * 60 * 60)
        return response
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Admin authentication error", extra={"context": {"error": str(e)}})
        return api_response(False, "Authentication failed", None, 500)
    finally:
        db.close()


@auth_bp.route("/verify-admin", methods=["GET"])
def verify_admin():
    admin = get_current_admin()
    if admin is None:
        return jsonify({"authenticated": False}), 401
    return jsonify({"authenticated": True, "user": admin}), 200


@auth_bp.route("/logout-admin", methods=["POST"])
def admin_logout():
    response = make_response(jsonify({"success": True}))
    _set_admin_cookie(response, "", 0)
    return response


# ------------------- CUSTOMERS -------------------
@auth_bp.route("/auth/signup", methods=["POST"])
@limiter.limit(AUTH_LIMIT)
def customer_signup():
    db = SessionLocal()
    try:
        customer = AuthService(db).register_customer(get_payload())
        login_user(customer)
        return api_response(True, "Account created successfully", serialize_customer(customer), 201)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Signup error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to create account", None, 500)
    finally:
        db.close()


@auth_bp.route("/auth/signin", methods=["POST"])
@limiter.limit(AUTH_LIMIT)
def customer_signin():
    db = SessionLocal()
    try:
        payload = get_payload()
        customer = AuthService(db).authenticate_customer(payload)
        login_user(customer, remember=bool(payload.get("remember")))
        return api_response(True, "Signed in successfully", serialize_customer(customer))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Signin error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to sign in", None, 500)
    finally:
        db.close()


@auth_bp.route("/auth/signout", methods=["POST"])
def customer_signout():
    logout_user()
    return api_response(True, "Signed out successfully")


@auth_bp.route("/auth/me", methods=["GET"])
@login_required
def customer_me():
    return api_response(True, "Authenticated", serialize_customer(current_user))


@auth_bp.route("/auth/forgot-password", methods=["POST"])
@limiter.limit(AUTH_LIMIT)
def forgot_password():
    """Always reports success so the endpoint cannot be used to probe accounts."""
    db = SessionLocal()
    try:
        AuthService(db).request_password_reset(
            get_payload().get("email"), current_app.config["SECRET_KEY"]
        )
        return api_response(
            True, "If an account exists for this email, a reset link has been sent"
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Password reset request error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to process request", None, 500)
    finally:
        db.close()


@auth_bp.route("/auth/reset-password", methods=["POST"])
@limiter.limit(AUTH_LIMIT)
def reset_password():
    db = SessionLocal()
    try:
        data = get_payload()
        AuthService(db).reset_password(
            current_app.config["SECRET_KEY"], data.get("token"), data.get("password")
        )
        return api_response(True, "Password updated successfully")
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Password reset error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to reset password", None, 500)
    finally:
        db.close()
