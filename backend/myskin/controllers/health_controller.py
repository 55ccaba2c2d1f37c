"""
Health controller - health check endpoints for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from myskin.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def health_check():
    """Liveness probe: the process is up and serving requests."""
    return jsonify({"status": "healthy"}), 200


@health_bp.route("/db", methods=["GET"])
def database_health_check():
    """
    Readiness probe: run ``SELECT 1`` against the configured database.

    Status codes:
        200: database reachable
        503: database unreachable
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return jsonify({"status": "healthy", "database": "connected"}), 200
    except SQLAlchemyError as e:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"endpoint": "/health/db", "error": str(e)}},
        )
        return jsonify({"status": "unhealthy", "database": "disconnected"}), 503
    finally:
        db.close()
