"""
Dispatcher

Pushes judge payloads onto the queue of their language:
- payloads without test cases are dropped (nothing to judge)
- the queue is probed before every push; a failed probe rebuilds the client
  and retries with exponential backoff up to a fixed number of attempts
- push and encoding failures surface as typed errors for the caller
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from onlinejudge.config import Settings
from onlinejudge.exceptions import (
    PayloadSerializationError,
    QueueUnavailableError,
)
from onlinejudge.schemas.judge import JudgePayload
from onlinejudge.services.queue_client import (
    QueueClient,
    QueueClientFactory,
    redis_client_factory,
)

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 0.2


@dataclass
class DispatchResult:
    """Outcome of a single dispatch."""
    submission_id: int
    queue: str
    queued: bool
    test_case_count: int = 0


class Dispatcher:
    """
    Enqueues judge payloads onto language-keyed queues.

    The client factory is injected so tests can hand in an in-memory fake.
    One dispatcher is shared by all request threads; the cached client is
    only replaced under a lock.
    """

    def __init__(
        self,
        client_factory: QueueClientFactory,
        max_attempts: int = DEFAULT_CONNECT_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client_factory = client_factory
        self._client: Optional[QueueClient] = None
        self._lock = threading.Lock()
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dispatcher":
        return cls(
            redis_client_factory(settings),
            max_attempts=settings.queue_connect_attempts,
            backoff_seconds=settings.queue_backoff_seconds,
        )

    def connected_client(self) -> QueueClient:
        """
        Return a client that just answered a ping.

        Raises:
            QueueUnavailableError: Every attempt failed
        """
        with self._lock:
            return self._ping_with_retry()

    def _ping_with_retry(self) -> QueueClient:
        # Caller holds self._lock
        last_error: Optional[Exception] = None
        for attempt in range(self.max_attempts):
            if self._client is None:
                self._client = self._client_factory()
            try:
                self._client.ping()
                return self._client
            except QueueUnavailableError as e:
                last_error = e
                logger.warning(
                    f"Judge queue ping failed (attempt {attempt + 1}/{self.max_attempts}): {e}"
                )
                self._discard_client()
                if attempt < self.max_attempts - 1:
                    self._sleep(self.backoff_seconds * (2 ** attempt))

        raise QueueUnavailableError(
            f"Judge queue unreachable after {self.max_attempts} attempts: {last_error}"
        )

    def is_available(self) -> bool:
        try:
            self.connected_client()
            return True
        except QueueUnavailableError:
            return False

    def dispatch(self, payload: JudgePayload) -> DispatchResult:
        """
        Push one payload onto the queue named by its language.

        Returns:
            DispatchResult with ``queued`` False when the payload carries no
            test cases (nothing is pushed)

        Raises:
            QueueUnavailableError: Liveness probe failed after retries
            QueuePushError: The push itself failed
            PayloadSerializationError: Payload could not be encoded
        """
        result = DispatchResult(
            submission_id=payload.submission_id,
            queue=payload.language,
            queued=False,
            test_case_count=len(payload.test_cases),
        )
        if not payload.test_cases:
            logger.info(
                f"Submission {payload.submission_id} not dispatched: problem has no test cases"
            )
            return result

        # Ping and push under one lock hold; the client cannot be discarded in between
        with self._lock:
            client = self._ping_with_retry()

            try:
                body = payload.to_wire()
            except (TypeError, ValueError) as e:
                raise PayloadSerializationError(
                    f"Cannot encode payload for submission {payload.submission_id}: {e}"
                ) from e

            length = client.push(payload.language, body)
        result.queued = True
        logger.info(
            f"Dispatched submission {payload.submission_id} to queue '{payload.language}' "
            f"({result.test_case_count} test cases, queue length {length})"
        )
        return result

    def _discard_client(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def close(self) -> None:
        with self._lock:
            self._discard_client()
