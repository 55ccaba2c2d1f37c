"""
Account use-cases for clinic staff and storefront customers.

Session handling (the admin cookie, Flask-Login) stays in the controllers;
this service only checks credentials and manages the account rows.
"""

import hmac
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from myskin.core.config import get_public_base_url
from myskin.core.exceptions import AuthenticationError, ConflictError, MySkinError, ValidationError
from myskin.core.security import (
    PASSWORD_RESET_MAX_AGE_SECONDS,
    generate_password_reset_token,
    hash_password,
    password_fingerprint,
    verify_password,
    verify_password_reset_token,
)
from myskin.core.validation import EMAIL_RE, SignupValidator
from myskin.db.base import AdminUser, Customer
from myskin.repositories.user_repository import AdminUserRepository, CustomerRepository
from myskin.services.email_service import EmailNotificationService

logger = logging.getLogger(__name__)

RESET_PASSWORD_PATH = "/auth/reset-password"


def _credentials(payload: Dict[str, Any]) -> tuple:
    email = str(payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""
    if not email or not password:
        raise ValidationError("Email and password are required")
    return email, password


class AuthService:
    def __init__(self, db: Session, email_service: Optional[EmailNotificationService] = None):
        self.admins = AdminUserRepository(db)
        self.customers = CustomerRepository(db)
        self._email_service = email_service

    @property
    def email_service(self) -> EmailNotificationService:
        if self._email_service is None:
            self._email_service = EmailNotificationService()
        return self._email_service

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def authenticate_admin(self, payload: Dict[str, Any]) -> AdminUser:
        email, password = _credentials(payload)
        admin = self.admins.get_by_email(email)
        if admin is None or not verify_password(password, admin.password_hash):
            logger.warning("Failed admin login", extra={"context": {"email": email}})
            raise AuthenticationError("Invalid credentials")
        logger.info("Admin logged in", extra={"context": {"admin_id": admin.id}})
        return admin

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def register_customer(self, payload: Dict[str, Any]) -> Customer:
        data = SignupValidator().validate(payload).raise_if_invalid("Invalid signup details")
        if self.customers.get_by_email(data["email"]) is not None:
            raise ConflictError("An account with this email already exists")

        customer = self.customers.create(
            Customer(
                email=data["email"],
                full_name=data["full_name"],
                password_hash=hash_password(data["password"]),
                active_flag=True,
            )
        )
        if customer is None:
            raise MySkinError("Failed to create account")
        logger.info("Customer registered", extra={"context": {"customer_id": customer.id}})
        return customer

    def authenticate_customer(self, payload: Dict[str, Any]) -> Customer:
        email, password = _credentials(payload)
        customer = self.customers.get_by_email(email)
        if (
            customer is None
            or not customer.is_active
            or not verify_password(password, customer.password_hash)
        ):
            logger.warning("Failed customer sign in", extra={"context": {"email": email}})
            raise AuthenticationError("Invalid email or password")
        return customer

    def request_password_reset(self, email: Optional[str], secret_key: str) -> None:
        """Email a reset link when the account exists. Callers always report success."""
        email = (email or "").strip().lower()
        if not EMAIL_RE.match(email):
            logger.info("Password reset requested with malformed email")
            return

        customer = self.customers.get_by_email(email)
        if customer is None:
            logger.info("Password reset requested for unknown email")
            return

        token = generate_password_reset_token(secret_key, customer.email, customer.password_hash)
        reset_url = f"{get_public_base_url()}{RESET_PASSWORD_PATH}?{urlencode({'token': token})}"
        self.email_service.send_password_reset(
            customer.email,
            customer.full_name,
            reset_url,
            PASSWORD_RESET_MAX_AGE_SECONDS // 60,
        )

    def reset_password(self, secret_key: str, token: Optional[str], password: Optional[str]) -> Customer:
        if not token:
            raise ValidationError("Reset token is required")
        password = password or ""
        if len(password) < SignupValidator.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Invalid password",
                [f"password: must have at least {SignupValidator.MIN_PASSWORD_LENGTH} characters"],
            )

        claims = verify_password_reset_token(secret_key, token)
        customer = self.customers.get_by_email(claims["email"]) if claims else None
        if customer is None or not hmac.compare_digest(
            claims["ph"], password_fingerprint(customer.password_hash)
        ):
            raise ValidationError("Reset link is invalid or has expired")

        updated = self.customers.set_password_hash(customer, hash_password(password))
        if updated is None:
            raise MySkinError("Failed to reset password")
        logger.info("Customer password reset", extra={"context": {"customer_id": customer.id}})
        return updated
