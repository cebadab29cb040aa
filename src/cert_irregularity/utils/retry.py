"""Retry policy for reading records and catalog types.

Source reads are idempotent, so transient connection and timeout failures
are retried. Writes are never retried: a failed apply is surfaced to the
reviewer instead.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from cert_irregularity.config import SOURCE_RETRY_ATTEMPTS

# tenacity's before_sleep_log requires a stdlib logger, NOT structlog.
_tenacity_logger = logging.getLogger("cert_irregularity.retry")

T = TypeVar("T")

TRANSIENT_SOURCE_ERRORS: tuple[type[BaseException], ...] = (ConnectionError, TimeoutError)


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[T]],
    attempts: int = SOURCE_RETRY_ATTEMPTS,
    max_wait: float = 10.0,
) -> T:
    """Call an async source read, retrying transient failures.

    Args:
        fetch: Zero-argument coroutine function performing the read.
        attempts: Maximum number of attempts.
        max_wait: Upper bound on the backoff between attempts, in seconds.

    Returns:
        Whatever ``fetch`` returns.

    Raises:
        ConnectionError: If every attempt failed with a connection error.
        TimeoutError: If every attempt timed out.
        Exception: Non-transient errors propagate on the first attempt.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(TRANSIENT_SOURCE_ERRORS),
        stop=stop_after_attempt(attempts),
        wait=wait_random_exponential(multiplier=0.5, max=max_wait),
        before_sleep=before_sleep_log(_tenacity_logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await fetch()

    # AsyncRetrying either returns from inside the loop or re-raises the last error
    msg = "retry loop exited without a result"
    raise RuntimeError(msg)
