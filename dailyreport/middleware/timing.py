"""
Request timing middleware.

Every request gets an id (taken from ``X-Request-ID`` when the proxy set
one) and a duration. Both go back to the client as response headers and into
one access-log line carrying the caller and the report the request touched,
so a report's history can be grepped out of the JSON logs.

Slow threshold: ``SLOW_REQUEST_MS`` config key.
"""

import logging
import time
import uuid

from flask import Flask, current_app, g, request

logger = logging.getLogger(__name__)

# Probe endpoints are polled constantly
_QUIET_PREFIXES = ("/api/v1/health", "/static/")

# URL variables that name a report-scoped resource
_SCOPE_ARGS = ("report_id", "visit_id", "comment_id", "customer_id")


def _request_scope() -> dict:
    view_args = request.view_args or {}
    return {name: view_args[name] for name in _SCOPE_ARGS if name in view_args}


def _access_line(response, duration_ms: float) -> tuple[int, str]:
    threshold = current_app.config.get("SLOW_REQUEST_MS", 1000)
    if response.status_code >= 500:
        return logging.ERROR, "Server error"
    if duration_ms > threshold:
        return logging.WARNING, "Slow request"
    return logging.DEBUG, "Request"


def init_request_timing(app: Flask):
    """Register before/after hooks for request timing."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _log_request(response):
        start = getattr(g, "request_start", None)
        if start is None:
            return response

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"

        if request.path.startswith(_QUIET_PREFIXES):
            return response

        actor = getattr(g, "actor", None)
        extra = {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "remote_addr": request.remote_addr,
            "request_id": g.request_id,
            "actor_id": actor.id if actor is not None else None,
            **_request_scope(),
        }
        level, label = _access_line(response, duration_ms)
        logger.log(level, "%s: %s %s %d (%.0fms)", label,
                   request.method, request.path, response.status_code, duration_ms,
                   extra=extra)
        return response
