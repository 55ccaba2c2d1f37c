"""
Catalog controller - storefront product browsing.

This controller:
- Handles HTTP concerns only
- Delegates filtering and lookups to CatalogService
"""

import logging

from flask import Blueprint, request

from myskin.core.api_utils import api_response, error_response
from myskin.core.exceptions import MySkinError
from myskin.db.session import SessionLocal
from myskin.services.catalog_service import CatalogService
from myskin.services.serializers import serialize_brand, serialize_category, serialize_product

logger = logging.getLogger(__name__)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


@catalog_bp.route("/products", methods=["GET"])
def list_products():
    """List active products.

    Query params: ``search``, ``category`` (id), ``brand`` (id),
    ``sort`` (``name`` | ``price-low`` | ``price-high``).
    """
    db = SessionLocal()
    try:
        products = CatalogService(db).list_products(
            search=request.args.get("search"),
            category=request.args.get("category"),
            brand=request.args.get("brand"),
            sort=request.args.get("sort"),
        )
        return api_response(
            True,
            "Products retrieved successfully",
            {"products": [serialize_product(p) for p in products], "count": len(products)},
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error listing products", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load products", None, 500)
    finally:
        db.close()


@catalog_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    db = SessionLocal()
    try:
        product = CatalogService(db).get_product(product_id)
        return api_response(True, "Product retrieved successfully", serialize_product(product))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(
            "Error loading product",
            extra={"context": {"product_id": product_id, "error": str(e)}},
        )
        return api_response(False, "Failed to load product", None, 500)
    finally:
        db.close()


@catalog_bp.route("/categories", methods=["GET"])
def list_categories():
    db = SessionLocal()
    try:
        categories = CatalogService(db).list_categories()
        return api_response(
            True, "Categories retrieved successfully", [serialize_category(c) for c in categories]
        )
    except Exception as e:
        logger.exception("Error listing categories", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load categories", None, 500)
    finally:
        db.close()


@catalog_bp.route("/brands", methods=["GET"])
def list_brands():
    db = SessionLocal()
    try:
        brands = CatalogService(db).list_brands()
        return api_response(
            True, "Brands retrieved successfully", [serialize_brand(b) for b in brands]
        )
    except Exception as e:
        logger.exception("Error listing brands", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load brands", None, 500)
    finally:
        db.close()
