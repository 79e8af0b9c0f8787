"""
Identity middleware: reads the caller's identity from a Bearer token.

Sets ``g.actor`` (``dailyreport.core.identity.Actor``) for every API request
that carries a valid token. Authentication itself happens elsewhere; a
missing, expired or tampered token simply leaves ``g.actor`` unset, and any
endpoint that needs an actor answers 401 through ``current_actor()``.
"""

import logging

import jwt as pyjwt
from flask import g, request

from dailyreport.core.exceptions import UnauthorizedError
from dailyreport.services.jwt_service import actor_from_token

logger = logging.getLogger(__name__)

# Paths that never need an identity
SKIP_PREFIXES = (
    "/api/v1/health",
    "/static/",
)


def init_identity_middleware(app):
    """Register the identity parser as a before_request hook."""

    @app.before_request
    def _read_identity():
        g.actor = None

        path = request.path
        if not path.startswith("/api/v1/"):
            return
        if path.startswith(SKIP_PREFIXES):
            return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return

        try:
            g.actor = actor_from_token(auth_header[7:])
        except pyjwt.ExpiredSignatureError:
            logger.info("Expired identity token on %s", path)
        except pyjwt.InvalidTokenError as exc:
            logger.warning("Invalid identity token on %s: %s", path, exc)


def current_actor():
    """Return the request's actor or raise ``UnauthorizedError``."""
    actor = getattr(g, "actor", None)
    if actor is None:
        raise UnauthorizedError("Authentication required")
    return actor
