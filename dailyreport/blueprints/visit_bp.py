"""
Daily Sales Report Service
Visit blueprint: single visit records of a report.

Endpoints:
    GET    /api/v1/reports/<id>/visits     list
    POST   /api/v1/reports/<id>/visits     add one visit
    PUT    /api/v1/visits/<id>             edit
    DELETE /api/v1/visits/<id>             remove
"""

from flask import Blueprint, jsonify

from dailyreport.blueprints import json_body
from dailyreport.middleware.identity import current_actor
from dailyreport.payloads import parse_visit_input
from dailyreport.services import visit_service

visit_bp = Blueprint("visits", __name__, url_prefix="/api/v1")


@visit_bp.route("/reports/<int:report_id>/visits", methods=["GET"])
def list_visits(report_id):
    visits = visit_service.list_visits(current_actor(), report_id)
    return jsonify({"items": [v.to_dict() for v in visits], "total": len(visits)})


@visit_bp.route("/reports/<int:report_id>/visits", methods=["POST"])
def add_visit(report_id):
    actor = current_actor()
    data = parse_visit_input(json_body())
    visit = visit_service.add_visit(actor, report_id, data)
    return jsonify(visit.to_dict()), 201


@visit_bp.route("/visits/<int:visit_id>", methods=["PUT"])
def update_visit(visit_id):
    actor = current_actor()
    data = parse_visit_input(json_body())
    visit = visit_service.update_visit(actor, visit_id, data)
    return jsonify(visit.to_dict())


@visit_bp.route("/visits/<int:visit_id>", methods=["DELETE"])
def delete_visit(visit_id):
    visit_service.delete_visit(current_actor(), visit_id)
    return jsonify({"message": "Visit deleted", "visit_id": visit_id}), 200
