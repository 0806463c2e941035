"""
M&O Legal Desk - Retrying Invoker

Bounded exponential-backoff retry around a single generative call.
Rate limits and server faults are retried; anything else is re-raised
immediately.
"""

from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from services.legal.clock import Clock, SystemClock
from services.llm.base import (
    GenerationRateLimitError,
    GenerationServerError,
    ResponseParseError,
)

logger = structlog.get_logger()

T = TypeVar("T")

QUOTA_MARKERS = ("429", "quota", "resource_exhausted")

_system_clock = SystemClock()


def _status_of(error: BaseException) -> Optional[int]:
    """Best-effort HTTP status extraction from any client library error."""
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_transient(error: BaseException) -> bool:
    """
    Classify a failure as retryable.

    Transient: rate limiting (429 or a quota message) and server faults (5xx).
    Everything else, including unparseable payloads, is terminal.
    """
    if isinstance(error, (GenerationRateLimitError, GenerationServerError)):
        return True
    if isinstance(error, ResponseParseError):
        return False

    status = _status_of(error)
    if status is not None and (status == 429 or status >= 500):
        return True

    message = str(error).lower()
    return any(marker in message for marker in QUOTA_MARKERS)


def backoff_delay_ms(attempt_index: int, base_delay_ms: int) -> int:
    """Delay after the failed attempt at attempt_index (0-based)."""
    return base_delay_ms * (2 ** attempt_index)


async def invoke_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    clock: Optional[Clock] = None,
    label: str = "generation",
) -> T:
    """
    Run an async operation, retrying transient failures with backoff.

    Args:
        operation: Zero-argument coroutine function
        max_attempts: Total calls allowed, including the first
        base_delay_ms: Delay before the second attempt; doubles each retry
        clock: Clock used for waiting (defaults to the system clock)
        label: Name used in logs

    Returns:
        The operation's result

    Raises:
        The last error, when it is terminal or attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    clock = clock or _system_clock
    started = clock.monotonic()

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as e:
            if not is_transient(e):
                raise
            if attempt == max_attempts - 1:
                logger.warning(
                    "generation_retries_exhausted",
                    label=label,
                    attempts=max_attempts,
                    elapsed_ms=round((clock.monotonic() - started) * 1000),
                    error=str(e)[:200],
                )
                raise

            delay_ms = backoff_delay_ms(attempt, base_delay_ms)
            logger.warning(
                "generation_retry_scheduled",
                label=label,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                delay_ms=delay_ms,
                error_type=type(e).__name__,
            )
            await clock.sleep(delay_ms / 1000)

    # Unreachable: the loop either returns or raises
    raise RuntimeError("retry loop exited without a result")
