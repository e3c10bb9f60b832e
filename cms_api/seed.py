"""
Seed data for the permission gate.
Creates one permission per (collection, action) and the default roles.
Idempotent: existing rows are reused.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from cms_api.models import Permission, Role, User
from cms_api.services import COLLECTIONS
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.security.permissions import Action

logger = get_logger(__name__)

ADMIN_ROLE = "admin"
EDITOR_ROLE = "editor"

# Editors manage content but cannot delete anything
EDITOR_ACTIONS = (Action.READ, Action.CREATE, Action.UPDATE)


def seed_permissions(db: Session) -> dict[str, Role]:
    """Ensure every permission and the admin/editor roles exist."""
    existing = {(p.resource, p.action): p for p in db.scalars(select(Permission))}

    permissions: list[Permission] = []
    for resource in COLLECTIONS:
        for action in Action.ALL:
            permission = existing.get((resource, action))
            if permission is None:
                permission = Permission(
                    resource=resource,
                    action=action,
                    description=f"{action} {resource}",
                )
                db.add(permission)
            permissions.append(permission)

    roles = {role.name: role for role in db.scalars(select(Role).where(Role.name.in_([ADMIN_ROLE, EDITOR_ROLE])))}
    admin = roles.get(ADMIN_ROLE) or Role(name=ADMIN_ROLE, description="Full access")
    editor = roles.get(EDITOR_ROLE) or Role(name=EDITOR_ROLE, description="Content editing, no deletion")
    admin.permissions = permissions
    editor.permissions = [p for p in permissions if p.action in EDITOR_ACTIONS]
    db.add_all([admin, editor])

    safe_commit(db)
    logger.info("Permissions seeded", permissions=len(permissions))
    return {ADMIN_ROLE: admin, EDITOR_ROLE: editor}


def ensure_user(db: Session, email: str, role: Role, full_name: str | None = None) -> User:
    """Create the user if missing, or move it to ``role``."""
    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        user = User(email=email, full_name=full_name)
        db.add(user)
    user.role = role
    user.is_active = True
    safe_commit(db)
    db.refresh(user)
    logger.info("User ensured", user_id=user.id, role=role.name)
    return user
