"""
Appointment bookings.

A booking is stored ``pending`` and the customer is handed a WhatsApp link
with the appointment details so the clinic can confirm it in chat.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import MySkinError, NotFoundError, ValidationError
from myskin.core.validation import BookingValidator
from myskin.db.base import Booking
from myskin.domain.entities import BookingStatus
from myskin.repositories.booking_repository import BookingRepository
from myskin.repositories.treatment_repository import TreatmentRepository
from myskin.utils.whatsapp import booking_message, build_whatsapp_url

logger = logging.getLogger(__name__)

# The booking form posts camelCase keys
FIELD_ALIASES = {
    "treatmentType": "treatment_type",
    "preferredDate": "preferred_date",
    "preferredTime": "preferred_time",
}


def normalize_booking_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(payload)
    for alias, name in FIELD_ALIASES.items():
        if alias in data and name not in data:
            data[name] = data.pop(alias)
    return data


class BookingService:
    def __init__(self, db: Session):
        self.bookings = BookingRepository(db)
        self.treatments = TreatmentRepository(db)

    def treatment_name(self, treatment_type: str) -> str:
        """Resolve a treatment id to its name; free text is returned unchanged."""
        if treatment_type and treatment_type.isdigit():
            treatment = self.treatments.get_by_id(int(treatment_type))
            if treatment is not None:
                return treatment.name
        return treatment_type

    def create_booking(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a booking request.

        Returns:
            ``{"booking": Booking, "whatsapp_url": str}``
        """
        data = BookingValidator().validate(normalize_booking_payload(payload)).raise_if_invalid(
            "Please fill in all required fields"
        )
        data["status"] = BookingStatus.PENDING

        booking = self.bookings.create(Booking(**data))
        if booking is None:
            raise MySkinError("Failed to create booking")

        message = booking_message(
            name=booking.name,
            email=booking.email,
            phone=booking.phone,
            treatment_name=self.treatment_name(booking.treatment_type),
            preferred_date=booking.preferred_date.isoformat(),
            preferred_time=booking.preferred_time,
            notes=booking.notes,
        )
        logger.info(
            "Booking created",
            extra={"context": {"booking_id": booking.id, "treatment_type": booking.treatment_type}},
        )
        return {"booking": booking, "whatsapp_url": build_whatsapp_url(message)}

    def list_bookings(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Booking]:
        if status and status not in BookingStatus.ALL:
            raise ValidationError(
                "Invalid status", [f"status: must be one of: {', '.join(BookingStatus.ALL)}"]
            )
        return self.bookings.list_filtered(search=(search or "").strip() or None, status=status)

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def update_booking(self, booking_id: int, payload: Dict[str, Any]) -> Booking:
        self.get_booking(booking_id)
        data = BookingValidator(partial=True).validate(
            normalize_booking_payload(payload)
        ).raise_if_invalid("Invalid booking")
        if not data:
            raise ValidationError("No fields to update")

        booking = self.bookings.update(booking_id, data)
        if booking is None:
            raise MySkinError("Failed to update booking")
        logger.info(
            "Booking updated",
            extra={"context": {"booking_id": booking_id, "fields": sorted(data)}},
        )
        return booking

    def delete_booking(self, booking_id: int) -> None:
        self.get_booking(booking_id)
        if not self.bookings.delete(booking_id):
            raise MySkinError("Failed to delete booking")
        logger.info("Booking deleted", extra={"context": {"booking_id": booking_id}})
