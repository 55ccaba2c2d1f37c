import csv
import io
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import MySkinError, NotFoundError
from myskin.core.validation import PricelistRequestValidator
from myskin.db.base import PricelistRequest
from myskin.repositories.pricelist_repository import PricelistRequestRepository

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Name", "Email", "Phone", "Address", "Date Requested"]


class PricelistService:
    """Price list requests from the storefront and their admin export."""

    def __init__(self, db: Session):
        self.requests = PricelistRequestRepository(db)

    def submit(self, payload: Dict[str, Any]) -> PricelistRequest:
        data = PricelistRequestValidator().validate(payload).raise_if_invalid(
            "Please fill in all required fields"
        )
        entry = self.requests.create(PricelistRequest(**data))
        if entry is None:
            raise MySkinError("Failed to submit request")
        logger.info("Pricelist requested", extra={"context": {"request_id": entry.id}})
        return entry

    def list_requests(self, search: Optional[str] = None) -> List[PricelistRequest]:
        return self.requests.list_filtered((search or "").strip() or None)

    def delete_request(self, request_id: int) -> None:
        if self.requests.get_by_id(request_id) is None:
            raise NotFoundError("Request not found")
        if not self.requests.delete(request_id):
            raise MySkinError("Failed to delete request")

    def export_csv(self, search: Optional[str] = None) -> str:
        return build_csv(self.list_requests(search))


def build_csv(entries: Iterable[PricelistRequest]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow(
            [
                entry.name,
                entry.email,
                entry.phone,
                entry.address,
                entry.created_at.strftime("%Y-%m-%d %H:%M:%S") if entry.created_at else "",
            ]
        )
    return buffer.getvalue()
