"""
Careers page: job listings and the applications submitted against them.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.config import CV_EXTENSIONS
from myskin.core.exceptions import MySkinError, NotFoundError, ValidationError
from myskin.core.validation import JobApplicationValidator, JobListingValidator, application_status_validator
from myskin.db.base import JobApplication, JobListing
from myskin.domain.entities import ApplicationStatus
from myskin.domain.interfaces import IFileStorage
from myskin.repositories.job_repository import JobApplicationRepository, JobListingRepository
from myskin.services.storage_service import LocalFileStorage

logger = logging.getLogger(__name__)

CV_FOLDER = "job-applications/cvs"


class JobService:
    def __init__(self, db: Session, storage: Optional[IFileStorage] = None):
        self.listings = JobListingRepository(db)
        self.applications = JobApplicationRepository(db)
        self._storage = storage

    @property
    def storage(self) -> IFileStorage:
        if self._storage is None:
            self._storage = LocalFileStorage()
        return self._storage

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_listings(self, include_inactive: bool = False) -> List[JobListing]:
        return self.listings.list_listings(include_inactive=include_inactive)

    def _get_listing(self, listing_id: Any) -> JobListing:
        try:
            listing_id = int(listing_id)
        except (TypeError, ValueError):
            raise ValidationError("Job listing ID is required")
        listing = self.listings.get_by_id(listing_id)
        if listing is None:
            raise NotFoundError("Job listing not found")
        return listing

    def create_listing(self, payload: Dict[str, Any]) -> JobListing:
        data = JobListingValidator().validate(payload).raise_if_invalid("Missing required fields")
        data.setdefault("is_active", True)
        listing = self.listings.create(JobListing(**data))
        if listing is None:
            raise MySkinError("Failed to create job listing")
        logger.info("Job listing created", extra={"context": {"listing_id": listing.id}})
        return listing

    def update_listing(self, payload: Dict[str, Any]) -> JobListing:
        """Full update; the listing id travels in the body as ``id``."""
        listing = self._get_listing(payload.get("id"))
        data = JobListingValidator().validate(payload).raise_if_invalid("Missing required fields")
        updated = self.listings.update(listing.id, data)
        if updated is None:
            raise MySkinError("Failed to update job listing")
        return updated

    def delete_listing(self, listing_id: Any) -> None:
        listing = self._get_listing(listing_id)
        if not self.listings.delete(listing.id):
            raise MySkinError("Failed to delete job listing")
        logger.info("Job listing deleted", extra={"context": {"listing_id": listing.id}})

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def submit_application(self, form: Dict[str, Any], cv_file=None) -> JobApplication:
        """
        Store an application, uploading the CV first when one is attached.

        The uploaded CV is removed again if the row cannot be written.
        """
        data = JobApplicationValidator().validate(form).raise_if_invalid(
            "Please fill in all required fields"
        )

        cv_url = None
        if cv_file is not None and cv_file.filename:
            cv_url = self.storage.save(cv_file, CV_FOLDER, CV_EXTENSIONS, field="cv")

        application = self.applications.create(
            JobApplication(**data, cv_url=cv_url, status=ApplicationStatus.PENDING)
        )
        if application is None:
            if cv_url:
                self.storage.delete(cv_url)
            raise MySkinError("Failed to submit application")

        logger.info(
            "Job application submitted",
            extra={
                "context": {
                    "application_id": application.id,
                    "position": application.position,
                    "has_cv": cv_url is not None,
                }
            },
        )
        return application

    def list_applications(self, status: Optional[str] = None) -> List[JobApplication]:
        if status and status not in ApplicationStatus.ALL:
            raise ValidationError(
                "Invalid status",
                [f"status: must be one of: {', '.join(ApplicationStatus.ALL)}"],
            )
        return self.applications.list_applications(status=status)

    def update_application_status(self, application_id: int, payload: Dict[str, Any]) -> JobApplication:
        data = application_status_validator().validate(payload).raise_if_invalid("Invalid status")
        if self.applications.get_by_id(application_id) is None:
            raise NotFoundError("Application not found")
        application = self.applications.update(application_id, data)
        if application is None:
            raise MySkinError("Failed to update application")
        logger.info(
            "Job application status updated",
            extra={"context": {"application_id": application_id, "status": data["status"]}},
        )
        return application
