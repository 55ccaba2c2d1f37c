"""
Checkout controller - online payments, bank-transfer orders and order lookup.

This controller:
- Handles HTTP concerns only (payload parsing, session cart, status codes)
- Delegates pricing, gateway calls and persistence to OrderService
"""

import logging

from flask import Blueprint, jsonify, request, session
from flask_login import current_user, login_required

from myskin.core.api_utils import api_response, error_response, get_payload
from myskin.core.exceptions import MySkinError
from myskin.core.limiter_config import FORM_LIMIT, limiter
from myskin.db.session import SessionLocal
from myskin.schemas.dtos import CheckoutRequest, ManualOrderRequest
from myskin.services.cart_service import CartService
from myskin.services.order_service import OrderService
from myskin.services.serializers import serialize_bank_details, serialize_order

logger = logging.getLogger(__name__)

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api")


@checkout_bp.route("/payments/initialize", methods=["POST"])
@limiter.limit(FORM_LIMIT)
def initialize_payment():
    """
    Start a Paystack checkout.

    Body: ``{customerInfo: {...}, cartItems?: [{id, quantity}], reference?}``.
    Without ``cartItems`` the session cart is charged.
    """
    db = SessionLocal()
    try:
        checkout = CheckoutRequest.from_payload(get_payload())
        data = OrderService(db).initialize_online_payment(checkout, CartService(session).items())
        return api_response(True, "Payment initialized successfully", data)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Payment initialization error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to initialize payment", None, 500)
    finally:
        db.close()


@checkout_bp.route("/payments/verify/<reference>", methods=["GET"])
def verify_payment(reference: str):
    db = SessionLocal()
    try:
        result = OrderService(db).verify_online_payment(reference)
        if result["verified"]:
            CartService(session).clear()
            return api_response(True, "Payment verified successfully", result)
        return api_response(False, "Payment was not successful", result, 400)
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            "Payment verification error",
            extra={"context": {"reference": reference, "error": str(e)}},
        )
        return api_response(False, "Failed to verify payment", None, 500)
    finally:
        db.close()


@checkout_bp.route("/orders/manual", methods=["POST"])
@limiter.limit(FORM_LIMIT)
@login_required
def create_manual_order():
    """
    Submit a bank-transfer order for admin review.

    Body: ``{customerDetails, paymentDetails, cartItems?, totalAmount?}``.
    """
    db = SessionLocal()
    try:
        order_request = ManualOrderRequest.from_payload(
            get_payload(), fallback_email=getattr(current_user, "email", None)
        )
        cart = CartService(session)
        order = OrderService(db).create_manual_order(order_request, cart.items())
        cart.clear()

        message = "Order submitted successfully. We'll verify your payment and update your order status."
        return (
            jsonify(
                {
                    "success": True,
                    "orderId": order.id,
                    "message": message,
                    "data": serialize_order(order),
                }
            ),
            201,
        )
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception("Manual order error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to submit order", None, 500)
    finally:
        db.close()


@checkout_bp.route("/orders/status", methods=["GET"])
def order_status():
    """Look up the latest order by email (``query`` contains ``@``) or order id fragment."""
    db = SessionLocal()
    try:
        order = OrderService(db).lookup_order_status(request.args.get("query"))
        return api_response(True, "Order found", serialize_order(order))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Order status lookup error", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to look up order", None, 500)
    finally:
        db.close()


@checkout_bp.route("/bank-details", methods=["GET"])
def bank_details():
    db = SessionLocal()
    try:
        details = OrderService(db).get_bank_details()
        return api_response(True, "Bank details retrieved successfully", serialize_bank_details(details))
    except MySkinError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error loading bank details", extra={"context": {"error": str(e)}})
        return api_response(False, "Failed to load bank details", None, 500)
    finally:
        db.close()
