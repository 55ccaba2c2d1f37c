"""
Jobs controller - careers listings and job applications.

Listings are public to read; writing them and reading applications needs
the admin cookie. Applications are multipart so a CV can be attached.
"""

import logging

from flask import Blueprint, request

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.auth_decorators import get_current_admin, require_admin
from myskin.core.exceptions import AuthenticationError, MySkinError
from myskin.core.limiter_config import FORM_LIMIT, limiter
from myskin.db.session import SessionLocal
from myskin.services.job_service import JobService
from myskin.services.serializers import serialize_job_application, serialize_job_listing

logger = logging.getLogger(__name__)

job_bp = Blueprint("jobs", __name__, url_prefix="/api")


# ------------------- LISTINGS -------------------
@job_bp.route("/job-listings", methods=["GET"])
def list_job_listings():
    """Active listings, newest first. ``includeInactive=true`` is admin-only."""
    db = SessionLocal()
    try:
        include_inactive = request.args.get("includeInactive") == "true"
        if include_inactive and get_current_admin() is None:
            raise AuthenticationError("Admin authentication required")

        listings = JobService(db).list_listings(include_inactive=include_inactive)
        return api_response(
            True,
            "Job listings retrieved successfully",
            {"jobListings": [serialize_job_listing(listing) for listing in listings]},
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error fetching job listings", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load job listings", None, 500)
    finally:
        db.close()


@job_bp.route("/job-listings", methods=["POST"])
@require_admin
def create_job_listing():
    db = SessionLocal()
    try:
        listing = JobService(db).create_listing(get_payload())
        return api_response(
            True, "Job listing created successfully", serialize_job_listing(listing), 201
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating job listing", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to create job listing", None, 500)
    finally:
        db.close()


@job_bp.route("/job-listings", methods=["PUT"])
@require_admin
def update_job_listing():
    db = SessionLocal()
    try:
        listing = JobService(db).update_listing(get_payload())
        return api_response(True, "Job listing updated successfully", serialize_job_listing(listing))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Error updating job listing", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to update job listing", None, 500)
    finally:
        db.close()


@job_bp.route("/job-listings", methods=["DELETE"])
@require_admin
def delete_job_listing():
    db = SessionLocal()
    try:
        JobService(db).delete_listing(request.args.get("id"))
        return api_response(True, "Job listing deleted successfully")
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Error deleting job listing", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to delete job listing", None, 500)
    finally:
        db.close()


# ------------------- APPLICATIONS -------------------
@job_bp.route("/job-applications", methods=["POST"])
@limiter.limit(FORM_LIMIT)
def submit_job_application():
    """Multipart form with an optional ``cv`` file (pdf, doc, docx)."""
    db = SessionLocal()
    try:
        application = JobService(db).submit_application(
            request.form.to_dict(), request.files.get("cv")
        )
        return api_response(
            True,
            "Application submitted successfully",
            serialize_job_application(application),
            201,
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Error processing application", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to submit application", None, 500)
    finally:
        db.close()


@job_bp.route("/job-applications", methods=["GET"])
@require_admin
def list_job_applications():
    db = SessionLocal()
    try:
        applications = JobService(db).list_applications(status=request.args.get("status"))
        return api_response(
            True,
            "Applications retrieved successfully",
            {"applications": [serialize_job_application(a) for a in applications]},
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error fetching applications", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to fetch applications", None, 500)
    finally:
        db.close()


@job_bp.route("/job-applications/<int:application_id>", methods=["PATCH"])
@require_admin
def update_job_application(application_id: int):
    db = SessionLocal()
    try:
        application = JobService(db).update_application_status(application_id, get_payload())
        return api_response(
            True, "Application updated successfully", serialize_job_application(application)
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            "Error updating application",
            extra={"context": {"application_id": application_id, "error": str(e)}},
        )
        return api_response(False, "Failed to update application", None, 500)
    finally:
        db.close()
