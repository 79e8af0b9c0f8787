"""
Daily Sales Report Service
Dashboard blueprint.

Endpoints:
    GET /api/v1/dashboard   personal aggregates for the calling actor
"""

from flask import Blueprint, jsonify

from dailyreport.middleware.identity import current_actor
from dailyreport.services import dashboard_service

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1")


@dashboard_bp.route("/dashboard", methods=["GET"])
def get_dashboard():
    return jsonify(dashboard_service.get_dashboard(current_actor()))
