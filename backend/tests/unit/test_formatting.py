"""
Unit tests for money formatting, order numbers, slugs and WhatsApp links.
"""

from decimal import Decimal
from urllib.parse import unquote

from myskin.utils.formatting import (
    format_naira,
    from_kobo,
    short_order_id,
    slugify,
    to_decimal,
    to_kobo,
)
from myskin.utils.whatsapp import booking_message, build_whatsapp_url, contact_message


class TestMoney:
    def test_format_naira(self):
        assert format_naira(1500) == "₦1,500.00"
        assert format_naira("99.5") == "₦99.50"
        assert format_naira(None) == "₦0.00"

    def test_kobo_conversion(self):
        assert to_kobo(Decimal("1234.56")) == 123456
        assert to_kobo("0.005") == 1
        assert from_kobo(250050) == Decimal("2500.50")

    def test_invalid_value_is_zero(self):
        assert to_decimal("abc") == Decimal("0")


class TestIdentifiers:
    def test_short_order_id_is_last_eight_characters(self):
        assert short_order_id("0f8fad5b-d9cb-469f-a165-70867728950e") == "7728950e"
        assert short_order_id("0F8FAD5B-D9CB-469F-A165-70867728950E") == "7728950E"
        assert short_order_id(None) == ""

    def test_slugify(self):
        assert slugify("Top 5 Skincare Tips!") == "top-5-skincare-tips"
        assert slugify("Crème Brûlée Facial") == "creme-brulee-facial"
        assert slugify("!!!") == ""


class TestWhatsApp:
    def test_url_encodes_message(self):
        url = build_whatsapp_url("Hello & welcome", number="+2348000000000")
        assert url.startswith("https://wa.me/2348000000000?text=")
        assert unquote(url.split("text=", 1)[1]) == "Hello & welcome"

    def test_booking_message_includes_notes_only_when_given(self):
        without_notes = booking_message(
            "Ada", "ada@example.com", "080", "Facial", "2025-01-10", "10:00"
        )
        assert "Notes:" not in without_notes
        with_notes = booking_message(
            "Ada", "ada@example.com", "080", "Facial", "2025-01-10", "10:00", notes="First visit"
        )
        assert "Notes: First visit" in with_notes

    def test_contact_message_defaults(self):
        message = contact_message("Ada", "ada@example.com", "Hi there")
        assert "*Phone:* Not provided" in message
        assert "*Subject:* General Inquiry" in message
