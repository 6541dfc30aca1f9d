"""Retry policy for Monday.com API calls.

A RetryPolicy bundles the attempt budget, the per-attempt delay schedule
and the predicate that decides which failures are worth repeating.
run_with_retry applies a policy to any coroutine factory.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import httpx

from qbo_monday.integrations.monday.errors import HttpError, MondayError, TransportError

if TYPE_CHECKING:
    from qbo_monday.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

TRANSIENT_PHRASES = (
    "timeout",
    "rate limit",
    "server error",
    "internal error",
    "service unavailable",
    "temporarily unavailable",
    "complexity budget",
    "too many requests",
)


def is_retryable_error(exc: BaseException) -> bool:
    """Classify an error as transient.

    Connection-level failures, HTTP 429 and 5xx responses, errors that
    flag themselves retryable and messages containing a known transient
    phrase are all retryable.
    """
    if isinstance(exc, (TransportError, httpx.RequestError)):
        return True
    if isinstance(exc, HttpError):
        if exc.status_code in RETRYABLE_STATUS_CODES or 500 <= exc.status_code < 600:
            return True
    if isinstance(exc, MondayError) and exc.retryable:
        return True
    message = str(exc).lower()
    return any(phrase in message for phrase in TRANSIENT_PHRASES)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a call and how long to wait in between.

    Attributes:
        max_attempts: Total attempts including the first one.
        delays: Seconds to wait before each retry. The last value is
            reused when there are more retries than delays.
        is_retryable: Predicate deciding whether a failure is retried.
    """

    max_attempts: int = 2
    delays: tuple[float, ...] = (30.0,)
    is_retryable: Callable[[BaseException], bool] = field(default=is_retryable_error)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if any(d < 0 for d in self.delays):
            raise ValueError("delays must be non-negative")

    def delay_for(self, retry_index: int) -> float:
        """Delay before retry number ``retry_index`` (0-based)."""
        if not self.delays:
            return 0.0
        return self.delays[min(retry_index, len(self.delays) - 1)]

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            max_attempts=settings.monday_retry_max_attempts,
            delays=tuple(settings.monday_retry_delays),
        )


DEFAULT_RETRY_POLICY = RetryPolicy()
NO_RETRY = RetryPolicy(max_attempts=1, delays=())


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    description: str = "Monday API call",
) -> T:
    """Await ``operation()`` under ``policy``.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        policy: Attempt budget, delay schedule and retryable predicate.
        description: Label used in log messages.

    Returns:
        The result of the first successful attempt.

    Raises:
        Exception: The first non-retryable error, or the last error once
            all attempts are used.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt >= policy.max_attempts or not policy.is_retryable(exc):
                raise
            delay = policy.delay_for(attempt - 1)
            logger.warning(
                "%s failed: %s, retrying in %.1fs (attempt %d/%d)",
                description, exc, delay, attempt, policy.max_attempts,
            )
            await asyncio.sleep(delay)

    raise RuntimeError("Unexpected retry loop exit")
