"""
Utilities module: Exceptions and sanitization.
"""

from shared.utils.exceptions import (
    ErrorKind,
    AppException,
    ValidationError,
    NotFoundError,
    InvariantViolationError,
    PersistenceError,
    AuthorizationError,
    AuthenticationError,
    CSRFError,
    RateLimitError,
    field_errors_from,
)
from shared.utils.sanitize import (
    sanitize_string,
    sanitize_email,
    sanitize_optional,
)

__all__ = [
    # exceptions
    "ErrorKind",
    "AppException",
    "ValidationError",
    "NotFoundError",
    "InvariantViolationError",
    "PersistenceError",
    "AuthorizationError",
    "AuthenticationError",
    "CSRFError",
    "RateLimitError",
    "field_errors_from",
    # sanitize
    "sanitize_string",
    "sanitize_email",
    "sanitize_optional",
]
