# File: helpers/retry_helpers.py
"""Retry helper for SalesQuest write paths.

Every store write that must not silently fail is wrapped in
`async_with_retry`. Only TransientStoreError is retried; authorization,
not-found and validation errors surface on the first attempt.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, TypeVar

from .. import const
from ..exceptions import TransientStoreError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_T = TypeVar("_T")


async def async_with_retry(
    func: Callable[..., Awaitable[_T]],
    *args: Any,
    attempts: int = const.DEFAULT_RETRY_ATTEMPTS,
    initial_delay: float = const.DEFAULT_RETRY_INITIAL_DELAY,
    backoff: float = const.DEFAULT_RETRY_BACKOFF,
    on_retry: Callable[[int, Exception], None] | None = None,
    **kwargs: Any,
) -> _T:
    """Await `func(*args, **kwargs)`, retrying transient store failures.

    Delays grow exponentially: initial_delay, initial_delay * backoff, ...

    Args:
        func: Coroutine function performing the write
        attempts: Total attempts including the first (minimum 1)
        initial_delay: Seconds to wait before the second attempt
        backoff: Multiplier applied to the delay after each failure
        on_retry: Optional callback receiving (attempt_number, error)

    Returns:
        Whatever `func` returns.

    Raises:
        TransientStoreError: When the last attempt also fails.
        Any other exception raised by `func`, immediately.
    """
    attempts = max(1, attempts)
    delay = initial_delay

    for attempt in range(1, attempts + 1):
        try:
            return await func(*args, **kwargs)
        except TransientStoreError as err:
            if attempt >= attempts:
                const.LOGGER.error(
                    "ERROR: %s failed after %s attempt(s): %s",
                    getattr(func, "__qualname__", func),
                    attempts,
                    err,
                )
                raise
            const.LOGGER.warning(
                "WARNING: %s attempt %s/%s failed (%s); retrying in %.1fs",
                getattr(func, "__qualname__", func),
                attempt,
                attempts,
                err,
                delay,
            )
            if on_retry is not None:
                on_retry(attempt, err)
            await asyncio.sleep(delay)
            delay *= backoff

    # Unreachable: the loop either returns or raises
    raise TransientStoreError(const.ERROR_STORE_WRITE_FAILED)
