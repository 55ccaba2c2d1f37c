"""
Booking controller - public appointment requests and their admin management.
"""

import logging

from flask import Blueprint, request

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.auth_decorators import require_admin
from myskin.core.exceptions import MySkinError
from myskin.core.limiter_config import FORM_LIMIT, limiter
from myskin.db.session import SessionLocal
from myskin.services.booking_service import BookingService
from myskin.services.serializers import serialize_booking

logger = logging.getLogger(__name__)

booking_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@booking_bp.route("", methods=["POST"])
@limiter.limit(FORM_LIMIT)
def create_booking():
    db = SessionLocal()
    try:
        result = BookingService(db).create_booking(get_payload())
        return api_response(
            True,
            "Booking request submitted successfully",
            {
                "booking": serialize_booking(result["booking"]),
                "whatsapp_url": result["whatsapp_url"],
            },
            201,
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating booking", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to submit booking", None, 500)
    finally:
        db.close()


@booking_bp.route("", methods=["GET"])
@require_admin
def list_bookings():
    db = SessionLocal()
    try:
        bookings = BookingService(db).list_bookings(
            search=request.args.get("search"), status=request.args.get("status")
        )
        return api_response(
            True, "Bookings retrieved successfully", [serialize_booking(b) for b in bookings]
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error listing bookings", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load bookings", None, 500)
    finally:
        db.close()


@booking_bp.route("/<int:booking_id>", methods=["GET"])
@require_admin
def get_booking(booking_id: int):
    db = SessionLocal()
    try:
        booking = BookingService(db).get_booking(booking_id)
        return api_response(True, "Booking retrieved successfully", serialize_booking(booking))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(
            "Error loading booking",
            extra={"context": {"booking_id": booking_id, "error": str(e)}},
        )
        return api_response(False, "Failed to load booking", None, 500)
    finally:
        db.close()


@booking_bp.route("/<int:booking_id>", methods=["PUT", "PATCH"])
@require_admin
def update_booking(booking_id: int):
    db = SessionLocal()
    try:
        booking = BookingService(db).update_booking(booking_id, get_payload())
        return api_response(True, "Booking updated successfully", serialize_booking(booking))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            "Error updating booking",
            extra={"context": {"booking_id": booking_id, "error": str(e)}},
        )
        return api_response(False, "Failed to update booking", None, 500)
    finally:
        db.close()


@booking_bp.route("/<int:booking_id>", methods=["DELETE"])
@require_admin
def delete_booking(booking_id: int):
    db = SessionLocal()
    try:
        BookingService(db).delete_booking(booking_id)
        return api_response(True, "Booking deleted successfully")
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            "Error deleting booking",
            extra={"context": {"booking_id": booking_id, "error": str(e)}},
        )
        return api_response(False, "Failed to delete booking", None, 500)
    finally:
        db.close()
