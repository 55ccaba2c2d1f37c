from typing import List, Optional

from myskin.db.base import JobApplication, JobListing
from myskin.repositories.base_repository import BaseRepository


class JobListingRepository(BaseRepository[JobListing]):
    model = JobListing

    def list_listings(self, include_inactive: bool = False) -> List[JobListing]:
        query = self.db.query(JobListing)
        if not include_inactive:
            query = query.filter(JobListing.is_active.is_(True))
        return query.order_by(JobListing.created_at.desc(), JobListing.id.desc()).all()


class JobApplicationRepository(BaseRepository[JobApplication]):
    model = JobApplication

    def list_applications(self, status: Optional[str] = None) -> List[JobApplication]:
        query = self.db.query(JobApplication)
        if status:
            query = query.filter(JobApplication.status == status)
        return query.order_by(
            JobApplication.applied_at.desc(), JobApplication.id.desc()
        ).all()

    def recent(self, limit: int = 5) -> List[JobApplication]:
        return (
            self.db.query(JobApplication)
            .order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
            .limit(limit)
            .all()
        )
