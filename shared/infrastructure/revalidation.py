"""
Cache revalidation signal.

After a successful mutation the admin API announces which public and admin
pages display the affected collection, so the presentation layer can
revalidate them. The signal is fire-and-forget: a failure to publish is
logged and never turns a committed mutation into an error.

Usage:
    publisher = get_revalidation_publisher()
    publisher.publish("faqs", ["/faq", "/admin/content/faq"])
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Sequence

import redis

from shared.config.settings import settings
from shared.config.logging import get_logger
from shared.infrastructure.correlation import get_request_id

logger = get_logger(__name__)


def build_message(collection: str, paths: Sequence[str]) -> str:
    """Serialize a revalidation message."""
    return json.dumps(
        {
            "collection": collection,
            "paths": list(paths),
            "request_id": get_request_id() or None,
            "emitted_at": datetime.now(timezone.utc).isoformat(),
        }
    )


class RevalidationPublisher(ABC):
    """Sink for revalidation signals."""

    @abstractmethod
    def publish(self, collection: str, paths: Sequence[str]) -> None:
        """Announce that ``paths`` must be revalidated."""


class LoggingRevalidationPublisher(RevalidationPublisher):
    """Only logs the paths. Used in development and when Redis is not deployed."""

    def publish(self, collection: str, paths: Sequence[str]) -> None:
        logger.info("Revalidate paths", collection=collection, paths=list(paths))


class RedisRevalidationPublisher(RevalidationPublisher):
    """Publishes the paths on a Redis pub/sub channel."""

    def __init__(self, client: redis.Redis, channel: str):
        self._client = client
        self._channel = channel

    def publish(self, collection: str, paths: Sequence[str]) -> None:
        message = build_message(collection, paths)
        try:
            receivers = self._client.publish(self._channel, message)
        except redis.RedisError as e:
            logger.warning(
                "Revalidation publish failed",
                collection=collection,
                channel=self._channel,
                error=str(e),
            )
            return
        logger.debug(
            "Revalidation published",
            collection=collection,
            channel=self._channel,
            receivers=receivers,
        )


class RecordingRevalidationPublisher(RevalidationPublisher):
    """Keeps every signal in memory. Handy for tests and dry runs."""

    def __init__(self) -> None:
        self.signals: list[tuple[str, list[str]]] = []

    def publish(self, collection: str, paths: Sequence[str]) -> None:
        self.signals.append((collection, list(paths)))

    @property
    def paths(self) -> list[str]:
        return [path for _, paths in self.signals for path in paths]


_publisher: RevalidationPublisher | None = None
_publisher_lock = threading.Lock()


def _create_publisher() -> RevalidationPublisher:
    if settings.revalidation_backend == "redis":
        client = redis.from_url(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_timeout,
        )
        return RedisRevalidationPublisher(client, settings.revalidation_channel)
    return LoggingRevalidationPublisher()


def get_revalidation_publisher() -> RevalidationPublisher:
    """
    FastAPI dependency returning the process-wide publisher.

    Override it in tests with ``app.dependency_overrides``.
    """
    global _publisher
    if _publisher is None:
        with _publisher_lock:
            if _publisher is None:
                _publisher = _create_publisher()
    return _publisher
