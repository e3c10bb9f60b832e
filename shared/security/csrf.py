"""
CSRF protection with signed double-submit tokens.

``GET /api/csrf`` sets the token as a cookie and returns it in the body. Every
mutating admin request must echo it in the CSRF header; the header must equal
the cookie and carry a valid HMAC-SHA256 signature.
"""

import hashlib
import hmac
import secrets

from fastapi import Request, Response

from shared.config.settings import settings
from shared.config.logging import get_logger
from shared.utils.exceptions import CSRFError

logger = get_logger(__name__)

_NONCE_BYTES = 32


def _sign(nonce: str) -> str:
    return hmac.new(settings.csrf_secret.encode(), nonce.encode(), hashlib.sha256).hexdigest()


def issue_csrf_token() -> str:
    """New token in the form ``<nonce>.<signature>``."""
    nonce = secrets.token_urlsafe(_NONCE_BYTES)
    return f"{nonce}.{_sign(nonce)}"


def verify_csrf_token(header_token: str | None, cookie_token: str | None) -> None:
    """
    Validate a submitted token against the cookie.

    Raises:
        CSRFError: When either token is missing, they differ, or the signature is wrong.
    """
    if not header_token or not cookie_token:
        raise CSRFError("missing token")

    if not hmac.compare_digest(header_token.encode(), cookie_token.encode()):
        raise CSRFError("token mismatch")

    nonce, sep, signature = header_token.rpartition(".")
    if not sep or not nonce:
        raise CSRFError("malformed token")
    if not hmac.compare_digest(signature.encode(), _sign(nonce).encode()):
        raise CSRFError("bad signature")


def set_csrf_cookie(response: Response, token: str) -> None:
    # Readable by the admin front-end so it can copy it into the header
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=token,
        httponly=False,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )


def require_csrf(request: Request) -> None:
    """Check the double-submit token of a mutating request."""
    verify_csrf_token(
        request.headers.get(settings.csrf_header_name),
        request.cookies.get(settings.csrf_cookie_name),
    )
