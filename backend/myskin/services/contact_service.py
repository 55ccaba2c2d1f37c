"""Contact form: email the clinic inbox and hand back a WhatsApp link."""

import logging
from typing import Any, Dict, Optional

from myskin.core.validation import ContactValidator
from myskin.services.email_service import EmailNotificationService
from myskin.utils.whatsapp import build_whatsapp_url, contact_message

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, email_service: Optional[EmailNotificationService] = None):
        self.email_service = email_service or EmailNotificationService()

    def submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Returns:
            ``{"email_sent": bool, "whatsapp_url": str}``
        """
        data = ContactValidator().validate(payload).raise_if_invalid("Missing required fields")

        email_result = self.email_service.send_contact_form(data)
        if not email_result["success"]:
            logger.warning(
                "Contact form email not delivered",
                extra={"context": {"sender": data["email"], "reason": email_result["message"]}},
            )

        message = contact_message(
            name=data["name"],
            email=data["email"],
            message=data["message"],
            phone=data.get("phone"),
            subject=data.get("subject"),
        )
        return {
            "email_sent": email_result["success"],
            "whatsapp_url": build_whatsapp_url(message),
        }
