"""
Shared dependencies and helpers for the admin routers.

Gate order on every mutating route:
    1. permission  (dependency, resolved first)
    2. rate limit  (slowapi decorator around the endpoint)
    3. CSRF        (first statement of the endpoint body)
"""

from typing import Callable

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cms_api.models import User
from cms_api.services import ActionResult, CollectionSpec
from shared.infrastructure.db import get_db
from shared.infrastructure.revalidation import RevalidationPublisher, get_revalidation_publisher
from shared.security import Action, admin_rate_limit, require_csrf, require_permission

__all__ = [
    "Action",
    "Depends",
    "Request",
    "Session",
    "User",
    "RevalidationPublisher",
    "admin_rate_limit",
    "endpoint_name",
    "get_db",
    "get_revalidation_publisher",
    "require_csrf",
    "require_permission",
    "respond",
]


def endpoint_name(name: str) -> Callable:
    """
    Give a factory-built endpoint a unique name.

    Both the OpenAPI operation id and the slowapi route registration are
    keyed by the function name, so it must be set before ``admin_rate_limit``
    wraps the function.
    """

    def decorator(func: Callable) -> Callable:
        func.__name__ = name
        func.__qualname__ = name
        return func

    return decorator


def respond(
    result: ActionResult,
    *,
    collection: CollectionSpec | None = None,
    publisher: RevalidationPublisher | None = None,
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Render an ActionResult with the status code of its error kind.

    After a successful mutation the collection's pages are announced for
    revalidation.
    """
    if result.success and collection is not None and publisher is not None:
        publisher.publish(collection.key, collection.revalidate_paths)

    status_code = success_status if result.success else result.status_code
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))
