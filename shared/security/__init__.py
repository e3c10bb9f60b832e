"""
Security gates: authentication, permissions, CSRF and rate limiting.
"""

from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    get_bearer_token,
    current_user,
)
from shared.security.permissions import Action, has_permission, require_permission
from shared.security.csrf import (
    issue_csrf_token,
    verify_csrf_token,
    set_csrf_cookie,
    require_csrf,
)
from shared.security.rate_limit import limiter, admin_rate_limit

__all__ = [
    # auth
    "sign_jwt",
    "verify_jwt",
    "get_bearer_token",
    "current_user",
    # permissions
    "Action",
    "has_permission",
    "require_permission",
    # csrf
    "issue_csrf_token",
    "verify_csrf_token",
    "set_csrf_cookie",
    "require_csrf",
    # rate limit
    "limiter",
    "admin_rate_limit",
]
