"""
Admin controller - the back-office API.

Every route requires the admin cookie. Routes are thin: each one hands a
callable to ``_respond`` which owns the session lifecycle and the uniform
error handling (typed errors to their status, anything else to a logged 500).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from flask import Blueprint, Response, g, request

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.auth_decorators import require_admin
from myskin.core.config import IMAGE_EXTENSIONS
from myskin.core.exceptions import MySkinError, ValidationError
from myskin.db.session import SessionLocal
from myskin.schemas.dtos import PaymentReviewRequest
from myskin.services.blog_service import BlogService
from myskin.services.catalog_service import CatalogService
from myskin.services.dashboard_service import DashboardService
from myskin.services.order_service import OrderService
from myskin.services.payment_review_service import PaymentReviewService
from myskin.services.pricelist_service import PricelistService
from myskin.services.serializers import (
    serialize_bank_details,
    serialize_blog_post,
    serialize_brand,
    serialize_category,
    serialize_manual_payment,
    serialize_order,
    serialize_pricelist_request,
    serialize_product,
    serialize_treatment,
)
from myskin.services.storage_service import LocalFileStorage
from myskin.services.treatment_service import TreatmentService

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

UPLOAD_FOLDERS = ("products", "blog", "treatments", "general")


def _respond(
    action: Callable[[Any], Any],
    success_message: str,
    failure_message: str,
    status_code: int = 200,
):
    db = SessionLocal()
    try:
        data = action(db)
        return api_response(True, success_message, data, status_code)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            failure_message,
            extra={
                "context": {
                    "endpoint": request.path,
                    "method": request.method,
                    "admin": g.get("admin", {}).get("email") if g.get("admin") else None,
                    "error": str(e),
                }
            },
        )
        return api_response(False, failure_message, None, 500)
    finally:
        db.close()


# ------------------- DASHBOARD -------------------
@admin_bp.route("/dashboard", methods=["GET"])
@require_admin
def dashboard():
    return _respond(
        lambda db: DashboardService(db).get_dashboard(),
        "Dashboard data retrieved successfully",
        "Failed to load dashboard",
    )


# ------------------- PRODUCTS -------------------
@admin_bp.route("/products", methods=["GET"])
@require_admin
def list_products():
    return _respond(
        lambda db: [
            serialize_product(p)
            for p in CatalogService(db).list_products_for_admin(request.args.get("search"))
        ],
        "Products retrieved successfully",
        "Failed to load products",
    )


@admin_bp.route("/products", methods=["POST"])
@require_admin
def create_product():
    return _respond(
        lambda db: serialize_product(CatalogService(db).create_product(get_payload())),
        "Product created successfully",
        "Failed to create product",
        201,
    )


@admin_bp.route("/products/<int:product_id>", methods=["GET"])
@require_admin
def get_product(product_id: int):
    return _respond(
        lambda db: serialize_product(CatalogService(db).get_product_for_admin(product_id)),
        "Product retrieved successfully",
        "Failed to load product",
    )


@admin_bp.route("/products/<int:product_id>", methods=["PUT", "PATCH"])
@require_admin
def update_product(product_id: int):
    return _respond(
        lambda db: serialize_product(CatalogService(db).update_product(product_id, get_payload())),
        "Product updated successfully",
        "Failed to update product",
    )


@admin_bp.route("/products/<int:product_id>", methods=["DELETE"])
@require_admin
def delete_product(product_id: int):
    return _respond(
        lambda db: CatalogService(db).delete_product(product_id),
        "Product deleted successfully",
        "Failed to delete product",
    )


# ------------------- CATEGORIES & BRANDS -------------------
@admin_bp.route("/categories", methods=["GET"])
@require_admin
def list_categories():
    return _respond(
        lambda db: [serialize_category(c) for c in CatalogService(db).list_categories()],
        "Categories retrieved successfully",
        "Failed to load categories",
    )


@admin_bp.route("/categories", methods=["POST"])
@require_admin
def create_category():
    return _respond(
        lambda db: serialize_category(CatalogService(db).create_category(get_payload())),
        "Category created successfully",
        "Failed to create category",
        201,
    )


@admin_bp.route("/categories/<int:category_id>", methods=["PUT", "PATCH"])
@require_admin
def update_category(category_id: int):
    return _respond(
        lambda db: serialize_category(
            CatalogService(db).update_category(category_id, get_payload())
        ),
        "Category updated successfully",
        "Failed to update category",
    )


@admin_bp.route("/categories/<int:category_id>", methods=["DELETE"])
@require_admin
def delete_category(category_id: int):
    return _respond(
        lambda db: CatalogService(db).delete_category(category_id),
        "Category deleted successfully",
        "Failed to delete category",
    )


@admin_bp.route("/brands", methods=["GET"])
@require_admin
def list_brands():
    return _respond(
        lambda db: [serialize_brand(b) for b in CatalogService(db).list_brands()],
        "Brands retrieved successfully",
        "Failed to load brands",
    )


@admin_bp.route("/brands", methods=["POST"])
@require_admin
def create_brand():
    return _respond(
        lambda db: serialize_brand(CatalogService(db).create_brand(get_payload())),
        "Brand created successfully",
        "Failed to create brand",
        201,
    )


@admin_bp.route("/brands/<int:brand_id>", methods=["PUT", "PATCH"])
@require_admin
def update_brand(brand_id: int):
    return _respond(
        lambda db: serialize_brand(CatalogService(db).update_brand(brand_id, get_payload())),
        "Brand updated successfully",
        "Failed to update brand",
    )


@admin_bp.route("/brands/<int:brand_id>", methods=["DELETE"])
@require_admin
def delete_brand(brand_id: int):
    return _respond(
        lambda db: CatalogService(db).delete_brand(brand_id),
        "Brand deleted successfully",
        "Failed to delete brand",
    )


# ------------------- TREATMENTS -------------------
def _treatment_with_products(service: TreatmentService, treatment) -> dict:
    return serialize_treatment(treatment, service.linked_product_ids(treatment.id))


@admin_bp.route("/treatments", methods=["GET"])
@require_admin
def list_treatments():
    def action(db):
        service = TreatmentService(db)
        return [_treatment_with_products(service, t) for t in service.list_all()]

    return _respond(action, "Treatments retrieved successfully", "Failed to load treatments")


@admin_bp.route("/treatments", methods=["POST"])
@require_admin
def create_treatment():
    def action(db):
        service = TreatmentService(db)
        return _treatment_with_products(service, service.create_treatment(get_payload()))

    return _respond(action, "Treatment created successfully", "Failed to create treatment", 201)


@admin_bp.route("/treatments/<int:treatment_id>", methods=["PUT", "PATCH"])
@require_admin
def update_treatment(treatment_id: int):
    def action(db):
        service = TreatmentService(db)
        return _treatment_with_products(
            service, service.update_treatment(treatment_id, get_payload())
        )

    return _respond(action, "Treatment updated successfully", "Failed to update treatment")


@admin_bp.route("/treatments/<int:treatment_id>", methods=["DELETE"])
@require_admin
def delete_treatment(treatment_id: int):
    return _respond(
        lambda db: TreatmentService(db).delete_treatment(treatment_id),
        "Treatment deleted successfully",
        "Failed to delete treatment",
    )


# ------------------- BLOG -------------------
@admin_bp.route("/blog", methods=["GET"])
@require_admin
def list_blog_posts():
    return _respond(
        lambda db: [
            serialize_blog_post(p, include_content=False)
            for p in BlogService(db).list_for_admin(request.args.get("search"))
        ],
        "Posts retrieved successfully",
        "Failed to load posts",
    )


@admin_bp.route("/blog", methods=["POST"])
@require_admin
def create_blog_post():
    return _respond(
        lambda db: serialize_blog_post(BlogService(db).create_post(get_payload())),
        "Post created successfully",
        "Failed to create post",
        201,
    )


@admin_bp.route("/blog/<int:post_id>", methods=["GET"])
@require_admin
def get_blog_post(post_id: int):
    return _respond(
        lambda db: serialize_blog_post(BlogService(db).get_post(post_id)),
        "Post retrieved successfully",
        "Failed to load post",
    )


@admin_bp.route("/blog/<int:post_id>", methods=["PUT", "PATCH"])
@require_admin
def update_blog_post(post_id: int):
    return _respond(
        lambda db: serialize_blog_post(BlogService(db).update_post(post_id, get_payload())),
        "Post updated successfully",
        "Failed to update post",
    )


@admin_bp.route("/blog/<int:post_id>", methods=["DELETE"])
@require_admin
def delete_blog_post(post_id: int):
    return _respond(
        lambda db: BlogService(db).delete_post(post_id),
        "Post deleted successfully",
        "Failed to delete post",
    )


# ------------------- ORDERS -------------------
@admin_bp.route("/orders", methods=["GET"])
@require_admin
def list_orders():
    return _respond(
        lambda db: [
            serialize_order(o)
            for o in OrderService(db).list_orders(
                search=request.args.get("search"), status=request.args.get("status")
            )
        ],
        "Orders retrieved successfully",
        "Failed to load orders",
    )


@admin_bp.route("/orders/<order_id>", methods=["GET"])
@require_admin
def get_order(order_id: str):
    return _respond(
        lambda db: serialize_order(OrderService(db).get_order(order_id)),
        "Order retrieved successfully",
        "Failed to load order",
    )


@admin_bp.route("/orders/<order_id>/status", methods=["PATCH", "PUT"])
@require_admin
def update_order_status(order_id: str):
    def action(db):
        order, email_result = OrderService(db).update_order_status(order_id, get_payload())
        data = serialize_order(order)
        data["email_sent"] = bool(email_result and email_result["success"])
        return data

    return _respond(action, "Order status updated successfully", "Failed to update order")


@admin_bp.route("/orders/<order_id>", methods=["DELETE"])
@require_admin
def delete_order(order_id: str):
    return _respond(
        lambda db: OrderService(db).delete_order(order_id),
        "Order deleted successfully",
        "Failed to delete order",
    )


# ------------------- MANUAL PAYMENTS -------------------
@admin_bp.route("/manual-payments", methods=["GET"])
@require_admin
def list_manual_payments():
    def action(db):
        result = PaymentReviewService(db).list_payments(
            search=request.args.get("search"), status=request.args.get("status")
        )
        return {
            "payments": [
                serialize_manual_payment(p, include_order=True) for p in result["payments"]
            ],
            "counts": result["counts"],
        }

    return _respond(action, "Payments retrieved successfully", "Failed to load payments")


@admin_bp.route("/manual-payments/<int:payment_id>", methods=["GET"])
@require_admin
def get_manual_payment(payment_id: int):
    return _respond(
        lambda db: serialize_manual_payment(
            PaymentReviewService(db).get_payment(payment_id), include_order=True
        ),
        "Payment retrieved successfully",
        "Failed to load payment",
    )


@admin_bp.route("/manual-payments/<int:payment_id>", methods=["PATCH", "PUT"])
@require_admin
def review_manual_payment(payment_id: int):
    """
    Approve or reject a pending bank transfer.

    Expected JSON: ``{"status": "approved" | "rejected", "notes"?, "reviewedBy"?}``
    """
    db = SessionLocal()
    try:
        review = PaymentReviewRequest.from_payload(get_payload())
        result = PaymentReviewService(db).review(payment_id, review, reviewer=g.admin["email"])
        data = serialize_manual_payment(result["payment"], include_order=True)
        data["email_sent"] = result["email_sent"]
        return api_response(True, result["message"], data)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            "Error updating payment",
            extra={"context": {"payment_id": payment_id, "error": str(e)}},
        )
        return api_response(False, "Failed to update payment", None, 500)
    finally:
        db.close()


# ------------------- PRICELIST REQUESTS -------------------
@admin_bp.route("/pricelist-requests", methods=["GET"])
@require_admin
def list_pricelist_requests():
    return _respond(
        lambda db: [
            serialize_pricelist_request(r)
            for r in PricelistService(db).list_requests(request.args.get("search"))
        ],
        "Requests retrieved successfully",
        "Failed to load requests",
    )


@admin_bp.route("/pricelist-requests/export.csv", methods=["GET"])
@require_admin
def export_pricelist_requests():
    db = SessionLocal()
    try:
        content = PricelistService(db).export_csv(request.args.get("search"))
        filename = f"pricelist-requests-{datetime.now(timezone.utc).date().isoformat()}.csv"
        return Response(
            content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
    except Exception as e:
        logger.exception("Error exporting pricelist requests", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to export requests", None, 500)
    finally:
        db.close()


@admin_bp.route("/pricelist-requests/<int:request_id>", methods=["DELETE"])
@require_admin
def delete_pricelist_request(request_id: int):
    return _respond(
        lambda db: PricelistService(db).delete_request(request_id),
        "Request deleted successfully",
        "Failed to delete request",
    )


# ------------------- BANK DETAILS -------------------
@admin_bp.route("/bank-details", methods=["GET"])
@require_admin
def get_bank_details():
    return _respond(
        lambda db: serialize_bank_details(OrderService(db).get_bank_details()),
        "Bank details retrieved successfully",
        "Failed to load bank details",
    )


@admin_bp.route("/bank-details", methods=["PUT", "POST"])
@require_admin
def save_bank_details():
    return _respond(
        lambda db: serialize_bank_details(OrderService(db).save_bank_details(get_payload())),
        "Bank details saved successfully",
        "Failed to save bank details",
    )


# ------------------- UPLOADS -------------------
@admin_bp.route("/upload", methods=["POST"])
@require_admin
def upload_image():
    """Multipart ``file`` plus optional ``folder`` (products, blog, treatments, general)."""
    try:
        folder = request.form.get("folder") or "general"
        if folder not in UPLOAD_FOLDERS:
            raise ValidationError(
                "Invalid folder", [f"folder: must be one of: {', '.join(UPLOAD_FOLDERS)}"]
            )
        url = LocalFileStorage().save(request.files.get("file"), folder, IMAGE_EXTENSIONS)
        return api_response(True, "File uploaded successfully", {"url": url}, 201)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Upload error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to upload file", None, 500)
