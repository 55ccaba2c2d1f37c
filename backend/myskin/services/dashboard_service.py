import logging
import time
from typing import Any, Dict

from sqlalchemy.orm import Session

from myskin.core.logging_config import log_performance
from myskin.repositories.blog_repository import BlogPostRepository
from myskin.repositories.booking_repository import BookingRepository
from myskin.repositories.catalog_repository import ProductRepository
from myskin.repositories.job_repository import JobApplicationRepository
from myskin.repositories.order_repository import ManualPaymentRepository, OrderRepository
from myskin.repositories.treatment_repository import TreatmentRepository
from myskin.services.serializers import (
    serialize_blog_post,
    serialize_booking,
    serialize_job_application,
    serialize_order,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


class DashboardService:
    """Admin dashboard: totals per table and the latest activity."""

    def __init__(self, db: Session):
        self.applications = JobApplicationRepository(db)
        self.bookings = BookingRepository(db)
        self.orders = OrderRepository(db)
        self.products = ProductRepository(db)
        self.treatments = TreatmentRepository(db)
        self.posts = BlogPostRepository(db)
        self.payments = ManualPaymentRepository(db)

    def get_dashboard(self) -> Dict[str, Any]:
        start = time.perf_counter()
        stats = {
            "total_applications": self.applications.count(),
            "total_bookings": self.bookings.count(),
            "total_orders": self.orders.count(),
            "total_products": self.products.count(),
            "total_treatments": self.treatments.count(),
            "total_blog_posts": self.posts.count(),
            "pending_payments": self.payments.status_counts().get("pending", 0),
        }
        recent = {
            "applications": [
                serialize_job_application(a) for a in self.applications.recent(RECENT_LIMIT)
            ],
            "bookings": [serialize_booking(b) for b in self.bookings.recent(RECENT_LIMIT)],
            "orders": [serialize_order(o) for o in self.orders.recent(RECENT_LIMIT)],
            "blog_posts": [
                serialize_blog_post(p, include_content=False) for p in self.posts.recent(RECENT_LIMIT)
            ],
        }
        log_performance("get_dashboard", (time.perf_counter() - start) * 1000, **stats)
        return {"stats": stats, "recent": recent}
