"""
Cart controller - the session shopping cart.

Every response carries the priced cart summary so the client never has to
compute totals itself.
"""

import logging

from flask import Blueprint, session

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.exceptions import MySkinError, NotFoundError
from myskin.core.validation import BaseValidator, ValidationResult
from myskin.db.session import SessionLocal
from myskin.repositories.catalog_repository import ProductRepository
from myskin.schemas.dtos import MAX_LINE_QUANTITY
from myskin.services.cart_service import CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _cart_payload(db):
    return CartService(session).summary(ProductRepository(db)).to_dict()


@cart_bp.route("", methods=["GET"])
def get_cart():
    db = SessionLocal()
    try:
        return api_response(True, "Cart retrieved successfully", _cart_payload(db))
    except Exception as e:
        logger.exception("Error loading cart", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load cart", None, 500)
    finally:
        db.close()


@cart_bp.route("/items", methods=["POST"])
def add_item():
    """Add ``{product_id, quantity}`` to the cart (quantity defaults to 1)."""
    db = SessionLocal()
    try:
        data = get_payload()
        result = ValidationResult()
        BaseValidator.validate_required_field(data.get("product_id"), "product_id", result)
        product_id = BaseValidator.validate_integer(data.get("product_id"), "product_id", result, min_value=1)
        quantity = BaseValidator.validate_integer(
            data.get("quantity", 1), "quantity", result, min_value=1, max_value=MAX_LINE_QUANTITY
        )
        result.raise_if_invalid("Invalid cart item")

        if ProductRepository(db).get_active(product_id) is None:
            raise NotFoundError("Product not found")

        CartService(session).add_item(product_id, quantity or 1)
        return api_response(True, "Item added to cart", _cart_payload(db))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error adding to cart", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to update cart", None, 500)
    finally:
        db.close()


@cart_bp.route("/items/<int:product_id>", methods=["PUT", "PATCH"])
def update_item(product_id: int):
    """Set a line's quantity; zero or less removes the line."""
    db = SessionLocal()
    try:
        result = ValidationResult()
        quantity = BaseValidator.validate_integer(get_payload().get("quantity"), "quantity", result)
        if quantity is None and result.is_valid:
            result.add_error("is required", "quantity")
        result.raise_if_invalid("Invalid quantity")

        CartService(session).update_quantity(product_id, quantity)
        return api_response(True, "Cart updated", _cart_payload(db))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error updating cart", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to update cart", None, 500)
    finally:
        db.close()


@cart_bp.route("/items/<int:product_id>", methods=["DELETE"])
def remove_item(product_id: int):
    db = SessionLocal()
    try:
        CartService(session).remove_item(product_id)
        return api_response(True, "Item removed from cart", _cart_payload(db))
    except Exception as e:
        logger.exception("Error updating cart", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to update cart", None, 500)
    finally:
        db.close()


@cart_bp.route("", methods=["DELETE"])
def clear_cart():
    CartService(session).clear()
    return api_response(True, "Cart cleared", {"items": [], "total_items": 0, "total_price": 0.0})
