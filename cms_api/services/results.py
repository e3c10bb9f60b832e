"""
Discriminated result returned by every collection operation.

Services raise the ``AppException`` taxonomy internally; the ``as_result``
boundary turns those (and storage failures) into a failed ``ActionResult`` so
nothing propagates past the service layer.

Usage:
    result = OrderedCollectionService(db, FAQS).reorder(ids)
    if not result.success:
        show(result.error)
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Generic, Optional, TypeVar

from fastapi import status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from shared.config.logging import get_logger
from shared.utils.exceptions import AppException, ErrorKind, PersistenceError

logger = get_logger(__name__)

T = TypeVar("T")

STATUS_BY_KIND: dict[str, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVARIANT_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorKind.PERSISTENCE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.CSRF: status.HTTP_403_FORBIDDEN,
    ErrorKind.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
}


class ActionResult(BaseModel, Generic[T]):
    """
    ``{success: true, data}`` or ``{success: false, error, error_kind}``.

    A failed reorder or remove still carries the collection as persisted in
    ``data`` so the caller can redraw from the source of truth.
    """

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    field_errors: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None) -> "ActionResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, exc: AppException, data: Any = None) -> "ActionResult":
        return cls(
            success=False,
            data=data,
            error=str(exc.detail),
            error_kind=exc.kind,
            field_errors=exc.field_errors,
        )

    @property
    def status_code(self) -> int:
        if self.success:
            return status.HTTP_200_OK
        return STATUS_BY_KIND.get(self.error_kind or "", status.HTTP_500_INTERNAL_SERVER_ERROR)


def as_result(operation: str, *, snapshot_on_failure: bool = False) -> Callable:
    """
    Wrap a service method so it always returns an ActionResult.

    The wrapped method returns an ActionResult on success and raises on
    failure. Failures roll the session back. With ``snapshot_on_failure`` the
    service's ``snapshot()`` is attached to the failed result.
    """

    def decorator(method: Callable[..., ActionResult]) -> Callable[..., ActionResult]:
        @functools.wraps(method)
        def wrapper(self, *args: Any, **kwargs: Any) -> ActionResult:
            try:
                return method(self, *args, **kwargs)
            except AppException as e:
                self.db.rollback()
                error = e
            except SQLAlchemyError as e:
                self.db.rollback()
                error = PersistenceError(
                    operation,
                    collection=self.collection.key,
                    error=str(e),
                )

            data = self.snapshot() if snapshot_on_failure else None
            return ActionResult.fail(error, data=data)

        return wrapper

    return decorator
