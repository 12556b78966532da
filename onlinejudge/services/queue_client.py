"""
Judge work queue clients.

Workers for each language block on a Redis list named after the language.
Producers append with RPUSH, so each list is a FIFO. The queue key is the
language string verbatim.
"""

import logging
from typing import Callable, Protocol

import redis

from onlinejudge.config import Settings
from onlinejudge.exceptions import QueuePushError, QueueUnavailableError

logger = logging.getLogger(__name__)


class QueueClient(Protocol):
    """Keyed FIFO push primitive with a liveness check."""

    def ping(self) -> None:
        """Raise QueueUnavailableError if the queue cannot be reached."""

    def push(self, key: str, payload: bytes) -> int:
        """Append ``payload`` to list ``key``; raise QueuePushError on failure."""

    def close(self) -> None:
        ...


QueueClientFactory = Callable[[], QueueClient]


class RedisQueueClient:
    """QueueClient backed by a redis-py connection pool."""

    def __init__(self, client: redis.Redis):
        self._redis = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisQueueClient":
        return cls(
            redis.from_url(
                settings.redis_url,
                socket_timeout=settings.queue_socket_timeout_seconds,
                socket_connect_timeout=settings.queue_connect_timeout_seconds,
            )
        )

    def ping(self) -> None:
        try:
            self._redis.ping()
        except redis.RedisError as e:
            raise QueueUnavailableError(f"Redis ping failed: {e}") from e

    def push(self, key: str, payload: bytes) -> int:
        try:
            return self._redis.rpush(key, payload)
        except redis.RedisError as e:
            raise QueuePushError(f"Redis RPUSH to '{key}' failed: {e}") from e

    def close(self) -> None:
        try:
            self._redis.close()
        except redis.RedisError as e:
            logger.warning(f"Error closing Redis client: {e}")


def redis_client_factory(settings: Settings) -> QueueClientFactory:
    """Factory producing a fresh Redis-backed client on every call."""
    def factory() -> QueueClient:
        return RedisQueueClient.from_settings(settings)
    return factory
