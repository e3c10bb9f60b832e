"""
Centralized exceptions for consistent error handling.

Every error carries a ``kind`` used by the result discriminator and an HTTP
status code used when a gate rejects a request before any service runs.

Usage:
    from shared.utils.exceptions import NotFoundError, InvariantViolationError

    raise NotFoundError("FAQ", faq_id)
    raise InvariantViolationError("Cannot activate a deleted testimonial")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class ErrorKind:
    """Discriminator values reported in failed results."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INVARIANT_VIOLATION = "invariant_violation"
    PERSISTENCE = "persistence"
    AUTHORIZATION = "authorization"
    AUTHENTICATION = "authentication"
    CSRF = "csrf"
    RATE_LIMIT = "rate_limit"


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class to ensure consistent
    logging and response format.
    """

    kind: str = ErrorKind.VALIDATION

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        field_errors: dict[str, list[str]] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, kind=self.kind, **log_context)

        self.field_errors = field_errors or {}
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 400 Bad Request
# =============================================================================


class ValidationError(AppException):
    """
    Caller supplied malformed input (400). Not retried.

    Usage:
        raise ValidationError("The reorder list cannot be empty")
        raise ValidationError("Invalid data", field_errors={"question": ["required"]})
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        detail: str,
        field_errors: dict[str, list[str]] | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            field_errors=field_errors,
            **log_context,
        )


# =============================================================================
# 404 Not Found
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found in the target collection (404).

    Usage:
        raise NotFoundError("FAQ", faq_id)
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 409 Conflict
# =============================================================================


class InvariantViolationError(AppException):
    """
    The operation would break a collection or lifecycle invariant (409).

    Usage:
        raise InvariantViolationError("Cannot activate a deleted testimonial")
    """

    kind = ErrorKind.INVARIANT_VIOLATION

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 401 / 403
# =============================================================================


class AuthenticationError(AppException):
    """Missing or invalid credentials (401)."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, detail: str = "Authentication required", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


class AuthorizationError(AppException):
    """
    Permission gate rejected the caller (403). Never retried automatically.

    Usage:
        raise AuthorizationError("faqs", "delete", user_id=user_id)
    """

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, resource: str | None = None, action: str | None = None, **log_context: Any):
        if resource and action:
            detail = f"Not allowed to {action} {resource}"
        else:
            detail = "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            resource=resource,
            action=action,
            **log_context,
        )


class CSRFError(AppException):
    """CSRF token missing, mismatched or tampered with (403)."""

    kind = ErrorKind.CSRF

    def __init__(self, reason: str = "invalid token", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Security validation failed. Refresh the page and try again.",
            log_level="warning",
            reason=reason,
            **log_context,
        )


# =============================================================================
# 429 / 503
# =============================================================================


class RateLimitError(AppException):
    """Rate limit exceeded (429)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, limit: str, retry_after: int | None = None, **log_context: Any):
        detail = f"Too many requests ({limit}). Try again later."
        headers = {"Retry-After": str(retry_after)} if retry_after else None

        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            log_level="warning",
            headers=headers,
            limit=limit,
            **log_context,
        )


class PersistenceError(AppException):
    """
    Transaction or storage failure (503).

    Safe to retry the whole operation: the transaction was rolled back.
    """

    kind = ErrorKind.PERSISTENCE

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            log_level="error",
            operation=operation,
            **log_context,
        )


def field_errors_from(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic error dicts by field name.

    The ``body``/``query`` location prefix FastAPI adds is dropped.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped
