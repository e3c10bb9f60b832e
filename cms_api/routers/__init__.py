"""
API routers.

Admin routes are mounted under /api/admin; every one of them requires a
bearer token and a matching permission.
"""

from fastapi import APIRouter

from .content import router as content_router, build_ordered_router
from .records import router as records_router, build_records_router
from .public import router as public_router
from .security import router as security_router

admin_router = APIRouter(prefix="/api/admin")
admin_router.include_router(content_router)
admin_router.include_router(records_router)

__all__ = [
    "admin_router",
    "public_router",
    "security_router",
    "build_ordered_router",
    "build_records_router",
]
