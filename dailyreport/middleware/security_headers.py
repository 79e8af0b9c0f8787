"""
Response hardening for a JSON-only API.

Nothing this service returns is meant to be rendered, framed or cached by a
browser. HSTS is only sent outside debug mode, where TLS terminates in front
of the app.
"""

_API_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def init_security_headers(app):
    hsts = None if app.debug else "max-age=31536000; includeSubDomains"

    @app.after_request
    def _harden(response):
        for name, value in _API_HEADERS.items():
            response.headers.setdefault(name, value)
        if hsts:
            response.headers.setdefault("Strict-Transport-Security", hsts)
        if response.mimetype == "application/json":
            response.headers.setdefault("Cache-Control", "no-store")
        response.headers.pop("Server", None)
        return response
