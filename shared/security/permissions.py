"""
Permission gate.

A user may perform ``action`` on ``resource`` when its role holds an active
permission with exactly that resource and action.

Usage:
    @router.delete("/faqs/{faq_id}")
    def delete_faq(user: User = Depends(require_permission("faqs", "delete"))):
        ...
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends

from cms_api.models import User
from shared.config.logging import audit_permission_event
from shared.security.auth import current_user
from shared.utils.exceptions import AuthorizationError


class Action:
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    ALL = (READ, CREATE, UPDATE, DELETE)


def has_permission(user: User | None, resource: str, action: str) -> bool:
    if user is None or not user.is_active or user.role is None:
        return False
    return any(
        permission.is_active and permission.resource == resource and permission.action == action
        for permission in user.role.permissions
    )


def require_permission(resource: str, action: str) -> Callable[..., User]:
    """Build a dependency that authenticates the caller and checks one permission."""

    def _check(user: User = Depends(current_user)) -> User:
        if not has_permission(user, resource, action):
            audit_permission_event(resource, action, user.id, granted=False, reason="missing permission")
            raise AuthorizationError(resource, action, user_id=user.id)
        audit_permission_event(resource, action, user.id, granted=True)
        return user

    return _check
