"""
Daily Sales Report Service
Customer master blueprint.

Endpoints:
    GET    /api/v1/customers               list (customer_name search, sort, order)
    POST   /api/v1/customers               create
    GET    /api/v1/customers/<id>          detail
    PUT    /api/v1/customers/<id>          update
    DELETE /api/v1/customers/<id>          delete (blocked while referenced)
"""

from flask import Blueprint, jsonify, request

from dailyreport.blueprints import json_body, page_response, paginate_query
from dailyreport.middleware.identity import current_actor
from dailyreport.payloads import parse_customer_filters, parse_customer_input
from dailyreport.services import customer_service

customer_bp = Blueprint("customers", __name__, url_prefix="/api/v1")


@customer_bp.route("/customers", methods=["GET"])
def list_customers():
    current_actor()
    filters = parse_customer_filters(request.args)
    q = customer_service.build_customer_query(**filters)
    customers, total, limit, offset = paginate_query(q)
    return jsonify(page_response([c.to_dict() for c in customers], total, limit, offset))


@customer_bp.route("/customers", methods=["POST"])
def create_customer():
    current_actor()
    customer = customer_service.create_customer(parse_customer_input(json_body()))
    return jsonify(customer.to_dict()), 201


@customer_bp.route("/customers/<int:customer_id>", methods=["GET"])
def get_customer(customer_id):
    current_actor()
    return jsonify(customer_service.get_customer(customer_id).to_dict())


@customer_bp.route("/customers/<int:customer_id>", methods=["PUT"])
def update_customer(customer_id):
    current_actor()
    customer = customer_service.update_customer(customer_id, parse_customer_input(json_body()))
    return jsonify(customer.to_dict())


@customer_bp.route("/customers/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id):
    current_actor()
    customer_service.delete_customer(customer_id)
    return jsonify({"message": "Customer deleted", "customer_id": customer_id}), 200
