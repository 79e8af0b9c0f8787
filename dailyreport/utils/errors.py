"""Standardised API error responses.

Usage
-----
    from dailyreport.utils.errors import api_error, E

    return api_error(E.NOT_FOUND, "Report not found")
    return api_error(E.VALIDATION, "report_date is required",
                     details={"report_date": "required"})

Services raise ``dailyreport.core.exceptions`` types instead of building
responses; ``register_error_handlers`` turns those into the same envelope.
"""

from __future__ import annotations

import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from dailyreport.core.exceptions import AppError

logger = logging.getLogger(__name__)


# ── Error code constants ──────────────────────────────────────────────
class E:
    """Machine-readable error code constants (``ERR_`` prefix)."""

    # Validation – HTTP 400 (malformed) / 422 (business rule)
    BAD_REQUEST = "ERR_BAD_REQUEST"
    VALIDATION = "ERR_VALIDATION"

    # Authentication – HTTP 401
    UNAUTHORIZED = "ERR_UNAUTHORIZED"

    # Permissions – HTTP 403
    FORBIDDEN_ACCESS = "ERR_FORBIDDEN_ACCESS"
    FORBIDDEN_EDIT = "ERR_FORBIDDEN_EDIT"
    FORBIDDEN_DELETE = "ERR_FORBIDDEN_DELETE"
    FORBIDDEN_COMMENT = "ERR_FORBIDDEN_COMMENT"

    # Not-found – HTTP 404
    NOT_FOUND = "ERR_NOT_FOUND"
    METHOD_NOT_ALLOWED = "ERR_METHOD_NOT_ALLOWED"

    # Conflict – HTTP 409
    DUPLICATE_ENTRY = "ERR_DUPLICATE_ENTRY"
    RESOURCE_IN_USE = "ERR_RESOURCE_IN_USE"

    # Throttling – HTTP 429
    RATE_LIMITED = "ERR_RATE_LIMITED"

    # Server – HTTP 500
    INTERNAL = "ERR_INTERNAL"


# ── Default HTTP status mapping ───────────────────────────────────────
_DEFAULT_STATUS: dict[str, int] = {
    E.BAD_REQUEST: 400,
    E.VALIDATION: 422,
    E.UNAUTHORIZED: 401,
    E.FORBIDDEN_ACCESS: 403,
    E.FORBIDDEN_EDIT: 403,
    E.FORBIDDEN_DELETE: 403,
    E.FORBIDDEN_COMMENT: 403,
    E.NOT_FOUND: 404,
    E.METHOD_NOT_ALLOWED: 405,
    E.DUPLICATE_ENTRY: 409,
    E.RESOURCE_IN_USE: 409,
    E.RATE_LIMITED: 429,
    E.INTERNAL: 500,
}


def api_error(
    code: str,
    message: str,
    *,
    status: int | None = None,
    details: dict | None = None,
):
    """Return a standard JSON error response.

    Parameters
    ----------
    code : str
        Machine-readable error code (use ``E.*`` constants).
    message : str
        Human-readable explanation for developers / UI.
    status : int, optional
        HTTP status override.  Falls back to ``_DEFAULT_STATUS[code]``,
        then to ``400``.
    details : dict, optional
        Field-level breakdown (field name -> message).

    Returns
    -------
    tuple[Response, int]
        ``(jsonify(body), http_status)`` – drop-in for Flask views.
    """

    http_status = status or _DEFAULT_STATUS.get(code, 400)

    body: dict = {
        "error": message,
        "code": code,
    }
    if details:
        body["details"] = details

    return jsonify(body), http_status


def register_error_handlers(app):
    """Map the exception taxonomy and stray HTTP errors onto ``api_error``."""

    @app.errorhandler(AppError)
    def _handle_app_error(error: AppError):
        if error.status >= 500:
            logger.error(
                "Internal failure on %s %s: %s",
                request.method, request.path, error.message,
                exc_info=error.__cause__ is not None,
                extra={"error_code": error.code},
            )
        else:
            logger.info(
                "Rejected %s %s: %s (%s)",
                request.method, request.path, error.message, error.code,
                extra={"error_code": error.code},
            )
        return api_error(error.code, error.message, status=error.status, details=error.details)

    @app.errorhandler(404)
    def _not_found(e):
        return api_error(E.NOT_FOUND, "Not found", details={"path": request.path})

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return api_error(E.METHOD_NOT_ALLOWED, "Method not allowed")

    @app.errorhandler(429)
    def _rate_limited(e):
        return api_error(E.RATE_LIMITED, "Too many requests", details={"retry_after": str(e.description)})

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return api_error(E.BAD_REQUEST, e.description or e.name, status=e.code)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unexpected error endpoint=%s", request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")
