"""WhatsApp deep links for booking and contact submissions.

The clinic answers bookings and enquiries on WhatsApp; after saving the
form we hand the customer a ``wa.me`` link with the message pre-filled.
"""

from typing import Optional
from urllib.parse import quote

from myskin.core.config import get_whatsapp_number


def build_whatsapp_url(message: str, number: Optional[str] = None) -> str:
    phone = (number or get_whatsapp_number()).lstrip("+")
    return f"https://wa.me/{phone}?text={quote(message, safe='')}"


def booking_message(
    name: str,
    email: str,
    phone: str,
    treatment_name: str,
    preferred_date: str,
    preferred_time: str,
    notes: Optional[str] = None,
) -> str:
    lines = [
        "Hello! I would like to book an appointment:",
        "",
        f"Name: {name}",
        f"Email: {email}",
        f"Phone: {phone}",
        f"Treatment: {treatment_name}",
        f"Preferred Date: {preferred_date}",
        f"Preferred Time: {preferred_time}",
    ]
    if notes:
        lines.append(f"Notes: {notes}")
    lines.extend(["", "Please confirm my appointment. Thank you!"])
    return "\n".join(lines)


def contact_message(
    name: str,
    email: str,
    message: str,
    phone: Optional[str] = None,
    subject: Optional[str] = None,
) -> str:
    return "\n".join(
        [
            "Hello! I have a message from your website:",
            "",
            f"*Name:* {name}",
            f"*Email:* {email}",
            f"*Phone:* {phone or 'Not provided'}",
            f"*Subject:* {subject or 'General Inquiry'}",
            "",
            "*Message:*",
            message,
            "",
            "Please get back to me. Thank you!",
        ]
    )
