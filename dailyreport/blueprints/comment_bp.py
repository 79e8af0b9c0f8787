"""
Daily Sales Report Service
Comment blueprint.

Endpoints:
    GET    /api/v1/reports/<id>/comments   list
    POST   /api/v1/reports/<id>/comments   create (managers only)
    DELETE /api/v1/comments/<id>           delete (author only)
"""

from flask import Blueprint, jsonify

from dailyreport.blueprints import json_body
from dailyreport.middleware.identity import current_actor
from dailyreport.payloads import parse_comment_input
from dailyreport.services import comment_service

comment_bp = Blueprint("comments", __name__, url_prefix="/api/v1")


@comment_bp.route("/reports/<int:report_id>/comments", methods=["GET"])
def list_comments(report_id):
    comments = comment_service.list_comments(current_actor(), report_id)
    return jsonify({"items": [c.to_dict() for c in comments], "total": len(comments)})


@comment_bp.route("/reports/<int:report_id>/comments", methods=["POST"])
def create_comment(report_id):
    actor = current_actor()
    text = parse_comment_input(json_body())
    comment = comment_service.create_comment(actor, report_id, text)
    return jsonify(comment.to_dict()), 201


@comment_bp.route("/comments/<int:comment_id>", methods=["DELETE"])
def delete_comment(comment_id):
    comment_service.delete_comment(current_actor(), comment_id)
    return jsonify({"message": "Comment deleted", "comment_id": comment_id}), 200
