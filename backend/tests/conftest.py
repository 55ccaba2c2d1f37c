"""
Central pytest configuration for the MySkin backend tests.

Environment variables are set before any ``myskin`` import so the lazy
engine, the limiter and the app factory all see the test configuration.
"""

import os
import sys
import tempfile
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest

backend_root = Path(__file__).parent.parent  # backend/
sys.path.insert(0, str(backend_root))

# Test database configuration (set early so import-time engines use it)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["LOG_TO_FILE"] = "0"
os.environ["FLASK_ENV"] = "development"
os.environ["UPLOAD_FOLDER"] = tempfile.mkdtemp(prefix="myskin-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://localhost:3000"
os.environ["WHATSAPP_NUMBER"] = "2348000000000"
# Never reach real providers from tests
for _name in ("RESEND_API_KEY", "PAYSTACK_SECRET_KEY", "ADMIN_EMAIL", "ADMIN_PASSWORD", "SENTRY_DSN"):
    os.environ.pop(_name, None)

from config.markers import *  # noqa: E402,F401,F403
from myskin.core.security import ADMIN_COOKIE_NAME, create_admin_token  # noqa: E402
from myskin.db.base import Brand, Category, Product  # noqa: E402
from myskin.db.session import SessionLocal, create_tables, drop_tables  # noqa: E402

ADMIN_EMAIL = "admin@myskin.test"


# =====================================================
# APPLICATION
# =====================================================


@pytest.fixture(scope="session")
def app():
    """Flask application shared by the whole test session."""
    from myskin.main import create_app

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts from empty tables."""
    drop_tables()
    create_tables()
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client carrying a valid admin cookie."""
    test_client = app.test_client()
    test_client.set_cookie(ADMIN_COOKIE_NAME, create_admin_token(1, ADMIN_EMAIL))
    return test_client


@pytest.fixture
def customer_client(app):
    """Test client signed in as a storefront customer."""
    test_client = app.test_client()
    response = test_client.post(
        "/api/auth/signup",
        json={
            "email": "ada@example.com",
            "full_name": "Ada Obi",
            "password": "correct-horse",
        },
    )
    assert response.status_code == 201, response.get_json()
    return test_client


# =====================================================
# DATA HELPERS
# =====================================================


@pytest.fixture
def make_product(db_session):
    """Factory creating active products; returns the persisted Product."""

    def _make(name="Hydrating Serum", price="5000.00", category=None, brand=None, **kwargs):
        category_obj = None
        if category:
            category_obj = db_session.query(Category).filter_by(name=category).first()
            if category_obj is None:
                category_obj = Category(name=category)
                db_session.add(category_obj)
                db_session.flush()
        brand_obj = None
        if brand:
            brand_obj = Brand(name=brand)
            db_session.add(brand_obj)
            db_session.flush()

        product = Product(
            name=name,
            price=Decimal(price),
            category_id=category_obj.id if category_obj else None,
            brand_id=brand_obj.id if brand_obj else None,
            stock_quantity=kwargs.pop("stock_quantity", 10),
            is_active=kwargs.pop("is_active", True),
            **kwargs,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def mock_email_service():
    """EmailNotificationService double whose sends all succeed."""
    service = Mock()
    ok = {"success": True, "message": "Email sent successfully"}
    service.send_payment_approval.return_value = ok
    service.send_payment_rejection.return_value = ok
    service.send_order_status_update.return_value = ok
    service.send_contact_form.return_value = ok
    service.send_password_reset.return_value = ok
    return service


@pytest.fixture
def customer_details():
    return {
        "name": "Ada Obi",
        "email": "ada@example.com",
        "phone": "08012345678",
        "address": "12 Allen Avenue",
        "city": "Ikeja",
        "state": "Lagos",
    }
