"""
Database seeding and initialization functions.

Idempotent helpers used by the ``manage.py`` commands and by ``create_app``
to make sure the data the storefront depends on exists: an admin account,
the active bank account shown at manual checkout and the base categories
that treatment recommendations map onto.
"""

import logging
import os
from typing import Dict, List, Optional

from myskin.core.security import hash_password
from myskin.db.base import AdminUser, BankDetails, Category
from myskin.db.session import SessionLocal

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "Skincare": ["Face Care", "Anti-Aging", "Acne Care", "Sun Protection"],
    "Body Care": ["After Care", "Hair Care"],
    "Oral Care": ["Dental", "Whitening"],
}


def ensure_admin_user(email: str, password: str, name: Optional[str] = None) -> AdminUser:
    """
    Create the admin account, or reset its password if it already exists.

    Args:
        email: Admin login email (stored lowercased)
        password: Plain text password, stored as a bcrypt hash
        name: Optional display name

    Returns:
        The persisted AdminUser
    """
    email = email.strip().lower()
    with SessionLocal() as db:
        try:
            admin = db.query(AdminUser).filter(AdminUser.email == email).first()
            if admin is None:
                admin = AdminUser(email=email, name=name, password_hash=hash_password(password))
                db.add(admin)
                action = "created"
            else:
                admin.password_hash = hash_password(password)
                if name:
                    admin.name = name
                action = "updated"
            db.commit()
            db.refresh(admin)
        except Exception:
            db.rollback()
            logger.exception(
                "Failed to ensure admin user", extra={"context": {"email": email}}
            )
            raise

    logger.info(
        f"Admin user {action}",
        extra={"context": {"admin_id": admin.id, "email": email}},
    )
    return admin


def ensure_admin_from_env() -> None:
    """Create the admin from ADMIN_EMAIL/ADMIN_PASSWORD when both are set and no admin exists."""
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        return

    with SessionLocal() as db:
        exists = db.query(AdminUser.id).first() is not None
    if exists:
        logger.debug("Admin account already present; ADMIN_EMAIL ignored")
        return
    ensure_admin_user(email, password)


def set_bank_details(bank_name: str, account_name: str, account_number: str) -> BankDetails:
    """Make the given account the single active bank account."""
    from myskin.repositories.order_repository import BankDetailsRepository

    with SessionLocal() as db:
        details = BankDetailsRepository(db).replace_active(
            BankDetails(
                bank_name=bank_name.strip(),
                account_name=account_name.strip(),
                account_number=account_number.strip(),
            )
        )
    if details is None:
        raise RuntimeError("Failed to set bank details")

    logger.info(
        "Active bank details updated",
        extra={"context": {"bank_details_id": details.id, "bank_name": details.bank_name}},
    )
    return details


def seed_categories() -> int:
    """Insert the default parent/child categories that are missing. Returns rows added."""
    added = 0
    with SessionLocal() as db:
        try:
            for parent_name, children in DEFAULT_CATEGORIES.items():
                parent = (
                    db.query(Category)
                    .filter(Category.name == parent_name, Category.parent_id.is_(None))
                    .first()
                )
                if parent is None:
                    parent = Category(name=parent_name)
                    db.add(parent)
                    db.flush()
                    added += 1
                for child_name in children:
                    exists = (
                        db.query(Category.id)
                        .filter(Category.name == child_name, Category.parent_id == parent.id)
                        .first()
                    )
                    if exists is None:
                        db.add(Category(name=child_name, parent_id=parent.id))
                        added += 1
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to seed categories")
            raise

    logger.info("Categories seeded", extra={"context": {"added": added}})
    return added
