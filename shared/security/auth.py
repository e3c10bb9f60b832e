"""
Authentication utilities.

Admin users authenticate with a bearer JWT (HS256). Issuing tokens is left
to the identity provider; ``sign_jwt`` exists for operators (CLI) and tests.
"""

from __future__ import annotations

import hashlib
import time
import uuid
from typing import Any

import jwt
from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from cms_api.models import Role, User
from shared.config.settings import JWT_SECRET, JWT_ISSUER, JWT_AUDIENCE, settings
from shared.config.logging import get_logger
from shared.infrastructure.db import get_db
from shared.utils.exceptions import AuthenticationError

logger = get_logger(__name__)


def _hash_jti(jti: str) -> str:
    """First 8 hex chars of the SHA256 of a token id, safe to log."""
    return hashlib.sha256(jti.encode()).hexdigest()[:8]


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign an access token with the given claims.

    Args:
        payload: Claims to include (at least ``sub``, the user id).
        ttl_seconds: Token lifetime. Defaults to the configured access expiry.

    Returns:
        Signed JWT string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: If the token is invalid, expired or lacks ``sub``.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        # The client only gets a generic message
        logger.warning("JWT validation failed", error=str(e))
        raise AuthenticationError("Invalid token")

    if not payload.get("sub"):
        raise AuthenticationError("Invalid token: missing subject claim")

    if payload.get("jti"):
        logger.debug("JWT accepted", sub=payload["sub"], jti_hash=_hash_jti(payload["jti"]))
    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or malformed.
    """
    if not authorization:
        raise AuthenticationError("Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid Authorization header format. Expected: Bearer <token>")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Missing bearer token")
    return token


def current_user(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency resolving the authenticated admin user.

    The user is loaded with its role and permissions so the permission gate
    does not issue extra queries.
    """
    claims = verify_jwt(get_bearer_token(authorization))

    user = db.scalar(
        select(User)
        .options(selectinload(User.role).selectinload(Role.permissions))
        .where(User.id == claims["sub"])
    )
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive", user_id=claims["sub"])
    return user
