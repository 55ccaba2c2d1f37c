"""Formatting helpers shared by email templates and API serializers.

This module provides:
- Currency formatting in Naira
- Short order numbers as shown to customers
- URL slugs for blog posts
- Money conversion to the gateway's minor unit (kobo)
"""

import logging
import re
import unicodedata
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

logger = logging.getLogger(__name__)

Number = Union[float, Decimal, int, str, None]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric-like value to Decimal, treating invalid input as 0."""
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, InvalidOperation):
        logger.warning(f"Invalid numeric value: {value}, using 0")
        return Decimal("0")


def format_naira(value: Number) -> str:
    """Format a value as Naira.

    Examples:
        format_naira(1500)       # "₦1,500.00"
        format_naira("99.5")     # "₦99.50"
        format_naira(None)       # "₦0.00"
    """
    amount = to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"₦{amount:,.2f}"


def to_kobo(value: Number) -> int:
    """Convert a Naira amount to integer kobo, rounding half up."""
    return int((to_decimal(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_kobo(value: Number) -> Decimal:
    return (to_decimal(value) / 100).quantize(Decimal("0.01"))


def short_order_id(order_id: Optional[str]) -> str:
    """Order number shown to customers: the last 8 characters of the id."""
    if not order_id:
        return ""
    return str(order_id)[-8:]


def slugify(text: str, max_length: int = 200) -> str:
    """Build a URL slug from a title.

    Examples:
        slugify("Top 5 Skincare Tips!")   # "top-5-skincare-tips"
        slugify("Crème Brûlée Facial")    # "creme-brulee-facial"
    """
    normalized = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode()
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def isoformat(value: Union[datetime, date, None]) -> Optional[str]:
    return value.isoformat() if value else None


def money(value: Number) -> float:
    """JSON representation of a money column."""
    return float(to_decimal(value))
