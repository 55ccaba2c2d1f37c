from typing import List, Optional

from sqlalchemy import or_

from myskin.db.base import PricelistRequest
from myskin.repositories.base_repository import BaseRepository, like_pattern


class PricelistRequestRepository(BaseRepository[PricelistRequest]):
    model = PricelistRequest

    def list_filtered(self, search: Optional[str] = None) -> List[PricelistRequest]:
        query = self.db.query(PricelistRequest)
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    PricelistRequest.name.ilike(pattern, escape="\\"),
                    PricelistRequest.email.ilike(pattern, escape="\\"),
                    PricelistRequest.phone.ilike(pattern, escape="\\"),
                )
            )
        return query.order_by(
            PricelistRequest.created_at.desc(), PricelistRequest.id.desc()
        ).all()
