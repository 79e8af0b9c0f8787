"""
Daily Sales Report Service
Sales person blueprint (read only, managers only).

Endpoints:
    GET /api/v1/sales-persons              list (name, department, is_manager)
    GET /api/v1/sales-persons/<id>         detail with manager_name
"""

from flask import Blueprint, jsonify, request

from dailyreport.blueprints import page_response, paginate_query
from dailyreport.core.exceptions import ValidationError
from dailyreport.middleware.identity import current_actor
from dailyreport.services import access_control, sales_person_service

sales_person_bp = Blueprint("sales_persons", __name__, url_prefix="/api/v1")

_BOOL_ARGS = {"true": True, "1": True, "false": False, "0": False}


@sales_person_bp.route("/sales-persons", methods=["GET"])
def list_sales_persons():
    access_control.require_manager(current_actor(), "the sales person list")
    is_manager = None
    raw = request.args.get("is_manager")
    if raw:
        if raw.lower() not in _BOOL_ARGS:
            raise ValidationError("Invalid query parameters", details={"is_manager": "must be true or false"})
        is_manager = _BOOL_ARGS[raw.lower()]

    q = sales_person_service.build_sales_person_query(
        name=request.args.get("name"),
        department=request.args.get("department"),
        is_manager=is_manager,
    )
    people, total, limit, offset = paginate_query(q)
    return jsonify(page_response([p.to_dict() for p in people], total, limit, offset))


@sales_person_bp.route("/sales-persons/<int:sales_person_id>", methods=["GET"])
def get_sales_person(sales_person_id):
    access_control.require_manager(current_actor(), "sales person details")
    return jsonify(sales_person_service.get_sales_person(sales_person_id).to_dict())
