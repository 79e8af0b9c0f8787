"""
Daily Sales Report Service
Blueprint registry and shared request helpers.
"""

from flask import current_app, request
from werkzeug.exceptions import BadRequest


def paginate_query(query, default_limit=None, max_limit=None):
    """Apply limit/offset pagination to a SQLAlchemy query.

    Query params:
        limit  - max items (default DEFAULT_PAGE_LIMIT, capped at MAX_PAGE_LIMIT)
        offset - starting position (default 0)

    Returns:
        (items_list, total_count, limit, offset)
    """
    default_limit = default_limit or current_app.config.get("DEFAULT_PAGE_LIMIT", 20)
    max_limit = max_limit or current_app.config.get("MAX_PAGE_LIMIT", 100)

    total = query.order_by(None).count()
    try:
        limit = min(max(int(request.args.get("limit", default_limit)), 1), max_limit)
    except (ValueError, TypeError):
        limit = default_limit
    try:
        offset = max(int(request.args.get("offset", 0)), 0)
    except (ValueError, TypeError):
        offset = 0
    items = query.limit(limit).offset(offset).all()
    return items, total, limit, offset


def page_response(items, total, limit, offset):
    return {"items": items, "total": total, "limit": limit, "offset": offset}


def json_body():
    """Decoded JSON body; malformed or missing JSON is a 400."""
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    return data
