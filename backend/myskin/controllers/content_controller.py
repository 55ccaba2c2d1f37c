"""
Content controller - public treatments and blog.
"""

import logging

from flask import Blueprint

from myskin.core.api_utils import api_response, error_response
from myskin.core.exceptions import MySkinError
from myskin.db.session import SessionLocal
from myskin.services.blog_service import BlogService
from myskin.services.serializers import serialize_blog_post, serialize_product, serialize_treatment
from myskin.services.treatment_service import TreatmentService

logger = logging.getLogger(__name__)

content_bp = Blueprint("content", __name__, url_prefix="/api")


@content_bp.route("/treatments", methods=["GET"])
def list_treatments():
    db = SessionLocal()
    try:
        treatments = TreatmentService(db).list_active()
        return api_response(
            True, "Treatments retrieved successfully", [serialize_treatment(t) for t in treatments]
        )
    except Exception as e:
        logger.exception("Error listing treatments", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load treatments", None, 500)
    finally:
        db.close()


@content_bp.route("/treatments/<int:treatment_id>/recommended-products", methods=["GET"])
def recommended_products(treatment_id: int):
    db = SessionLocal()
    try:
        products = TreatmentService(db).recommended_products(treatment_id)
        return api_response(
            True,
            "Recommended products retrieved successfully",
            [serialize_product(p) for p in products],
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(
            "Error loading recommended products",
            extra={"context": {"treatment_id": treatment_id, "error": str(e)}},
        )
        return api_response(False, "Failed to load recommended products", None, 500)
    finally:
        db.close()


@content_bp.route("/blog", methods=["GET"])
def list_blog_posts():
    db = SessionLocal()
    try:
        posts = BlogService(db).list_published()
        return api_response(
            True,
            "Posts retrieved successfully",
            [serialize_blog_post(p, include_content=False) for p in posts],
        )
    except Exception as e:
        logger.exception("Error listing blog posts", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load posts", None, 500)
    finally:
        db.close()


@content_bp.route("/blog/<slug>", methods=["GET"])
def get_blog_post(slug: str):
    db = SessionLocal()
    try:
        result = BlogService(db).get_published(slug)
        return api_response(
            True,
            "Post retrieved successfully",
            {
                "post": serialize_blog_post(result["post"]),
                "related": [
                    serialize_blog_post(p, include_content=False) for p in result["related"]
                ],
            },
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(
            "Error loading blog post", extra={"context": {"slug": slug, "error": str(e)}}
        )
        return api_response(False, "Failed to load post", None, 500)
    finally:
        db.close()
