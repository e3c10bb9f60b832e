"""
Infrastructure module: database sessions, correlation ids, revalidation signal.
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
)
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
)
from shared.infrastructure.revalidation import (
    RevalidationPublisher,
    LoggingRevalidationPublisher,
    RedisRevalidationPublisher,
    RecordingRevalidationPublisher,
    get_revalidation_publisher,
)

__all__ = [
    # db
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    # correlation
    "CorrelationIdMiddleware",
    "CorrelationIdFilter",
    "get_request_id",
    # revalidation
    "RevalidationPublisher",
    "LoggingRevalidationPublisher",
    "RedisRevalidationPublisher",
    "RecordingRevalidationPublisher",
    "get_revalidation_publisher",
]
