"""
Contact controller - contact form and price list requests.
"""

import logging

from flask import Blueprint

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.exceptions import MySkinError
from myskin.core.limiter_config import FORM_LIMIT, limiter
from myskin.db.session import SessionLocal
from myskin.services.contact_service import ContactService
from myskin.services.pricelist_service import PricelistService
from myskin.services.serializers import serialize_pricelist_request

logger = logging.getLogger(__name__)

contact_bp = Blueprint("contact", __name__, url_prefix="/api")


@contact_bp.route("/contact", methods=["POST"])
@limiter.limit(FORM_LIMIT)
def submit_contact():
    """
    Email the clinic and return a WhatsApp link with the same message.

    The request succeeds even when the email could not be delivered;
    ``email_sent`` tells the client which channel worked.
    """
    try:
        result = ContactService().submit(get_payload())
        return api_response(True, "Message sent successfully!", result)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Contact form error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to send message", None, 500)


@contact_bp.route("/pricelist-requests", methods=["POST"])
@limiter.limit(FORM_LIMIT)
def submit_pricelist_request():
    db = SessionLocal()
    try:
        entry = PricelistService(db).submit(get_payload())
        return api_response(
            True,
            "Request received! We'll send the price list shortly.",
            serialize_pricelist_request(entry),
            201,
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Pricelist request error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to submit request", None, 500)
    finally:
        db.close()
