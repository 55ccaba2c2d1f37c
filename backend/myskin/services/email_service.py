"""
Transactional email notifications.

``ResendEmailSender`` talks to the Resend API; ``EmailNotificationService``
renders the HTML for each notification and never raises: every method
returns ``{"success": bool, "message": str}`` so a failed email cannot
undo the database change that triggered it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import resend
from jinja2 import Environment

from myskin.core.config import get_clinic_email, get_mail_from, get_resend_api_key
from myskin.core.validation import EMAIL_RE
from myskin.domain.interfaces import IEmailSender
from myskin.services import email_templates
from myskin.utils.formatting import format_naira, short_order_id

logger = logging.getLogger(__name__)

_jinja = Environment(autoescape=True)

ORDER_STATUS_MESSAGES = {
    "completed": "Your order has been confirmed and is being prepared for shipment.",
    "shipped": "Your order has been shipped and is on its way to you!",
    "cancelled": (
        "Your order has been cancelled. If you have any questions, "
        "please contact our support team."
    ),
}


class EmailNotConfiguredError(RuntimeError):
    pass


class ResendEmailSender(IEmailSender):
    """Email sender using the Resend API."""

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        self.api_key = api_key if api_key is not None else get_resend_api_key()
        self.from_email = from_email or get_mail_from()

    def send(
        self,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.api_key:
            raise EmailNotConfiguredError("RESEND_API_KEY is not configured")

        resend.api_key = self.api_key
        params: Dict[str, Any] = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if reply_to:
            params["reply_to"] = reply_to

        response = resend.Emails.send(params)
        return dict(response) if response else {}


def render(template: str, **context: Any) -> str:
    return _jinja.from_string(template).render(clinic_email=get_clinic_email(), **context)


class EmailNotificationService:
    """Builds and sends the clinic's customer and staff notifications."""

    def __init__(self, sender: Optional[IEmailSender] = None):
        self.sender = sender or ResendEmailSender()

    def _deliver(
        self,
        kind: str,
        to: Optional[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
        success_message: str = "Email sent successfully",
    ) -> Dict[str, Any]:
        if not to or not EMAIL_RE.match(to):
            logger.warning(
                "Email skipped: invalid recipient",
                extra={"context": {"kind": kind, "recipient": to}},
            )
            return {"success": False, "message": "Invalid recipient email"}

        try:
            response = self.sender.send(to, subject, html, reply_to=reply_to)
        except EmailNotConfiguredError:
            logger.warning(
                "Email skipped: provider not configured",
                extra={"context": {"kind": kind, "recipient": to}},
            )
            return {"success": False, "message": "Email service not configured"}
        except Exception as e:
            logger.error(
                "Failed to send email",
                extra={"context": {"kind": kind, "recipient": to, "error": str(e)}},
                exc_info=True,
            )
            return {"success": False, "message": "Failed to send email"}

        logger.info(
            "Email sent",
            extra={
                "context": {
                    "kind": kind,
                    "recipient": to,
                    "provider_id": (response or {}).get("id"),
                }
            },
        )
        return {"success": True, "message": success_message}

    @staticmethod
    def _order_context(order) -> Dict[str, Any]:
        return {
            "customer_name": order.customer_name or "Customer",
            "order_number": short_order_id(order.id),
            "total_amount": format_naira(order.total_amount),
        }

    def send_payment_approval(self, order) -> Dict[str, Any]:
        html = render(
            email_templates.PAYMENT_APPROVED_TEMPLATE,
            payment_method="Bank Transfer",
            status_label="Confirmed",
            **self._order_context(order),
        )
        return self._deliver(
            "payment_approved",
            order.user_email,
            "Payment Approved - Order Confirmed",
            html,
            reply_to=get_clinic_email(),
        )

    def send_payment_rejection(self, order, reason: Optional[str] = None) -> Dict[str, Any]:
        html = render(
            email_templates.PAYMENT_REJECTED_TEMPLATE,
            payment_method="Bank Transfer",
            status_label=None,
            reason=reason,
            **self._order_context(order),
        )
        return self._deliver(
            "payment_rejected",
            order.user_email,
            "Payment Verification Issue - Action Required",
            html,
            reply_to=get_clinic_email(),
        )

    def send_order_status_update(self, order, new_status: str) -> Dict[str, Any]:
        label = new_status.capitalize()
        html = render(
            email_templates.ORDER_STATUS_TEMPLATE,
            status_message=ORDER_STATUS_MESSAGES.get(
                new_status, f"Your order status has been updated to {new_status}."
            ),
            payment_method=None,
            status_label=label,
            **self._order_context(order),
        )
        return self._deliver(
            "order_status",
            order.user_email,
            f"Order Update - {label}",
            html,
            reply_to=get_clinic_email(),
        )

    def send_contact_form(self, contact: Dict[str, Any]) -> Dict[str, Any]:
        html = render(
            email_templates.CONTACT_FORM_TEMPLATE,
            name=contact.get("name"),
            email=contact.get("email"),
            phone=contact.get("phone"),
            subject=contact.get("subject"),
            message=contact.get("message"),
            sent_on=datetime.now(timezone.utc).strftime("%d %b %Y"),
        )
        return self._deliver(
            "contact_form",
            get_clinic_email(),
            f"Contact Form: {contact.get('subject') or 'General Inquiry'}",
            html,
            reply_to=contact.get("email"),
            success_message="Contact email sent successfully",
        )

    def send_password_reset(
        self, email: str, customer_name: str, reset_url: str, expires_minutes: int
    ) -> Dict[str, Any]:
        html = render(
            email_templates.PASSWORD_RESET_TEMPLATE,
            customer_name=customer_name or "Customer",
            reset_url=reset_url,
            expires_minutes=expires_minutes,
        )
        return self._deliver("password_reset", email, "Reset your MySkin password", html)
