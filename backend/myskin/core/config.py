"""
Centralized configuration module for application-wide settings.

Values come from environment variables (optionally loaded from a .env file
by ``myskin.main``). Getters are evaluated on each call so tests can adjust
the environment before exercising a service; module-level constants are
provided for settings that are fixed for the lifetime of the process.
"""

import logging
import os

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower().strip() in _TRUTHY


# ===========================
# Environment
# ===========================


def get_environment() -> str:
    """Return the deployment environment name (``development`` by default)."""
    return os.getenv("FLASK_ENV", "development")


def is_production() -> bool:
    return get_environment() == "production"


def is_testing() -> bool:
    return _env_flag("TESTING")


# ===========================
# Public site
# ===========================


def get_public_base_url() -> str:
    """
    Get the public base URL of the storefront.

    Used to build the payment gateway callback URL and links inside emails.

    Environment Variables:
        PUBLIC_BASE_URL: e.g. ``https://myskinaestheticsclinic.com``
            Default: ``http://localhost:5000``
    """
    return os.getenv("PUBLIC_BASE_URL", "http://localhost:5000").rstrip("/")


def get_whatsapp_number() -> str:
    """Clinic WhatsApp number in international format without ``+``."""
    return os.getenv("WHATSAPP_NUMBER", "2348038905589")


# ===========================
# Payment gateway
# ===========================


def get_paystack_secret_key() -> str | None:
    """
    Get the Paystack secret key.

    Returns:
        str | None: Secret key, or None when online payments are not configured

    Environment Variables:
        PAYSTACK_SECRET_KEY: ``sk_live_...`` or ``sk_test_...``
    """
    return os.getenv("PAYSTACK_SECRET_KEY") or None


def get_paystack_base_url() -> str:
    return os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/")


PAYSTACK_TIMEOUT_SECONDS = 30


# ===========================
# Email
# ===========================


def get_resend_api_key() -> str | None:
    """Resend API key; emails are skipped (and logged) when unset."""
    return os.getenv("RESEND_API_KEY") or None


def get_mail_from() -> str:
    return os.getenv("MAIL_FROM", "MySkin Aesthetics <info@myskinaestheticsclinic.com>")


def get_clinic_email() -> str:
    """Inbox that receives contact form submissions."""
    return os.getenv("CLINIC_EMAIL", "info@myskinaestheticsclinic.com")


# ===========================
# Uploads
# ===========================


def get_upload_folder() -> str:
    """
    Get the directory where uploaded files (CVs, product images) are stored.

    Environment Variables:
        UPLOAD_FOLDER: Absolute or relative directory path
            Default: ``<backend>/uploads``
    """
    default = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "uploads",
    )
    return os.getenv("UPLOAD_FOLDER", default)


def get_max_upload_mb() -> int:
    try:
        return max(1, int(os.getenv("MAX_UPLOAD_MB", "10")))
    except ValueError:
        logger.warning(
            "Invalid MAX_UPLOAD_MB value, falling back to 10",
            extra={"context": {"MAX_UPLOAD_MB": os.getenv("MAX_UPLOAD_MB")}},
        )
        return 10


CV_EXTENSIONS = {"pdf", "doc", "docx"}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}


# ===========================
# Rate limiting
# ===========================


def get_limiter_storage_uri() -> str:
    return os.getenv("LIMITER_STORAGE_URI", "memory://")


def is_rate_limit_enabled() -> bool:
    return os.getenv("RATE_LIMIT_ENABLED", "1") != "0"


# ===========================
# Startup logging
# ===========================


def log_integration_config():
    """
    Log which external integrations are configured.

    Should be called during application startup to provide visibility
    into missing credentials without leaking their values.
    """
    logger.info(
        "Integration configuration loaded",
        extra={
            "context": {
                "environment": get_environment(),
                "paystack_configured": get_paystack_secret_key() is not None,
                "paystack_base_url": get_paystack_base_url(),
                "email_configured": get_resend_api_key() is not None,
                "mail_from": get_mail_from(),
                "upload_folder": get_upload_folder(),
                "public_base_url": get_public_base_url(),
            }
        },
    )
