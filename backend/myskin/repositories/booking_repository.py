from typing import List, Optional

from sqlalchemy import or_

from myskin.db.base import Booking
from myskin.repositories.base_repository import BaseRepository, like_pattern


class BookingRepository(BaseRepository[Booking]):
    """Repository for appointment bookings."""

    model = Booking

    def list_filtered(
        self, search: Optional[str] = None, status: Optional[str] = None
    ) -> List[Booking]:
        """
        List bookings newest first.

        Args:
            search: Substring matched against name, email, phone and treatment
            status: Exact status filter
        """
        query = self.db.query(Booking)
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    Booking.name.ilike(pattern, escape="\\"),
                    Booking.email.ilike(pattern, escape="\\"),
                    Booking.phone.ilike(pattern, escape="\\"),
                    Booking.treatment_type.ilike(pattern, escape="\\"),
                )
            )
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def recent(self, limit: int = 5) -> List[Booking]:
        return (
            self.db.query(Booking)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .limit(limit)
            .all()
        )
