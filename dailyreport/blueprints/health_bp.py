"""
Health check blueprint. No identity required.

Endpoints:
    GET /api/v1/health/live    process is up; never touches the database
    GET /api/v1/health/ready   database round trip plus schema presence
"""

import logging
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from dailyreport.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/v1/health")

REQUIRED_TABLES = ("sales_persons", "customers", "daily_reports", "visit_records", "comments")


@health_bp.route("/live", methods=["GET"])
def live():
    return jsonify({"status": "ok"}), 200


def _check_database() -> dict:
    t0 = time.perf_counter()
    db.session.execute(db.text("SELECT 1"))
    latency_ms = round((time.perf_counter() - t0) * 1000, 1)
    missing = [t for t in REQUIRED_TABLES if not inspect(db.engine).has_table(t)]
    if missing:
        return {"status": "error", "latency_ms": latency_ms, "missing_tables": missing}
    return {"status": "ok", "latency_ms": latency_ms}


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness: the store answers and the schema has been migrated."""
    try:
        database = _check_database()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Readiness check: database failed: %s", exc)
        database = {"status": "error"}

    healthy = database["status"] == "ok"
    return jsonify({
        "status": "healthy" if healthy else "degraded",
        "checks": {
            "database": database,
            "app": {"testing": current_app.testing, "debug": current_app.debug},
        },
    }), 200 if healthy else 503
