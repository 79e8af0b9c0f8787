"""
Daily Sales Report Service
Report blueprint: report CRUD and status changes.

Endpoints:
    GET    /api/v1/reports                 list (filters, sort, pagination)
    POST   /api/v1/reports                 create with visits
    GET    /api/v1/reports/<id>            detail with visits and comments
    PUT    /api/v1/reports/<id>            full replace
    DELETE /api/v1/reports/<id>            delete (draft only)
    PATCH  /api/v1/reports/<id>/status     change status
"""

import logging

from flask import Blueprint, jsonify, request

from dailyreport.blueprints import json_body, page_response, paginate_query
from dailyreport.middleware.identity import current_actor
from dailyreport.payloads import parse_report_filters, parse_report_input, parse_status_input
from dailyreport.services import report_lifecycle, report_service

logger = logging.getLogger(__name__)

report_bp = Blueprint("reports", __name__, url_prefix="/api/v1")


@report_bp.route("/reports", methods=["GET"])
def list_reports():
    actor = current_actor()
    filters = parse_report_filters(request.args)
    q = report_service.build_report_query(actor, filters)
    reports, total, limit, offset = paginate_query(q)
    return jsonify(page_response(report_service.summarize_reports(reports), total, limit, offset))


@report_bp.route("/reports", methods=["POST"])
def create_report():
    actor = current_actor()
    data = parse_report_input(json_body())
    report = report_service.create_report(actor, data)
    return jsonify(report.to_dict()), 201


@report_bp.route("/reports/<int:report_id>", methods=["GET"])
def get_report(report_id):
    report = report_service.get_report(current_actor(), report_id)
    return jsonify(report.to_dict())


@report_bp.route("/reports/<int:report_id>", methods=["PUT"])
def update_report(report_id):
    actor = current_actor()
    data = parse_report_input(json_body())
    report = report_service.update_report(actor, report_id, data)
    return jsonify(report.to_dict())


@report_bp.route("/reports/<int:report_id>", methods=["DELETE"])
def delete_report(report_id):
    report_service.delete_report(current_actor(), report_id)
    return jsonify({"message": "Report deleted", "report_id": report_id}), 200


@report_bp.route("/reports/<int:report_id>/status", methods=["PATCH"])
def change_status(report_id):
    actor = current_actor()
    target = parse_status_input(json_body())
    report = report_lifecycle.change_status(actor, report_id, target)
    status = report.status_enum
    return jsonify({
        "report_id": report.id,
        "status": status.value,
        "status_label": status.label,
        "updated_at": report.updated_at.isoformat() if report.updated_at else None,
    })
