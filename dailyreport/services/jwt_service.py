"""
JWT Service: identity token generation and verification.

Tokens are minted by the external auth service; this application only needs
to read them. ``generate_access_token`` exists for that service's shared
library, the demo seed command and the test suite.

Algorithm: HS256
Lifetime:  8 hours (configurable via JWT_ACCESS_EXPIRES)

Token payload:
{
    "sub": "<sales_person_id>",
    "is_manager": true | false,
    "type": "access",
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from dailyreport.core.identity import Actor


DEFAULT_ACCESS_EXPIRES = 28800  # 8 hours
ALGORITHM = "HS256"


def _get_secret():
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def _get_access_expires():
    return current_app.config.get("JWT_ACCESS_EXPIRES", DEFAULT_ACCESS_EXPIRES)


def generate_access_token(sales_person_id: int, is_manager: bool) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        # PyJWT requires a string subject
        "sub": str(sales_person_id),
        "is_manager": bool(is_manager),
        "type": "access",
        "iat": now,
        "exp": now + timedelta(seconds=_get_access_expires()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Raises jwt.exceptions on failure (ExpiredSignatureError, InvalidTokenError).
    """
    payload = jwt.decode(token, _get_secret(), algorithms=[ALGORITHM])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError(f"Expected access token, got {payload.get('type')}")
    return payload


def actor_from_token(token: str) -> Actor:
    payload = decode_access_token(token)
    try:
        actor_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("Token subject is not a sales person id") from exc
    return Actor(id=actor_id, is_manager=bool(payload.get("is_manager", False)))
