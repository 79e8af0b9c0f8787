"""
Rate limiting per blueprint using Flask-Limiter.

The Limiter instance is created in ``dailyreport/__init__.py`` without
default limits; this module attaches limits per route group. Requests are
keyed by the caller's sales person id when a token was presented, else by
remote address.

Limits (config keys, defaults below):
    - RATELIMIT_WRITE: report / visit / comment / customer routes, 120/minute
    - RATELIMIT_READ: dashboard and sales persons (read only), 300/minute
    - health probes: exempt

Usage:
    from dailyreport.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

from flask import g, request

DEFAULT_WRITE_LIMIT = "120/minute"
DEFAULT_READ_LIMIT = "300/minute"


def rate_limit_key():
    actor = getattr(g, "actor", None)
    if actor is not None:
        return f"actor:{actor.id}"
    return request.remote_addr or "unknown"


def init_rate_limits(app, limiter):
    """Apply limits to registered blueprints; no-op while testing."""
    if app.config.get("TESTING") or not app.config.get("RATELIMIT_ENABLED", True):
        app.logger.info("Rate limiter disabled")
        return

    write_limit = app.config.get("RATELIMIT_WRITE", DEFAULT_WRITE_LIMIT)
    read_limit = app.config.get("RATELIMIT_READ", DEFAULT_READ_LIMIT)

    for bp_name in ("reports", "visits", "comments", "customers"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(write_limit, key_func=rate_limit_key)(bp)

    for bp_name in ("dashboard", "sales_persons"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(read_limit, key_func=rate_limit_key)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: write=%s, read=%s", write_limit, read_limit)
