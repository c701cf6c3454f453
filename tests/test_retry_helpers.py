"""Tests for async_with_retry."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from custom_components.salesquest.exceptions import (
    TransientStoreError,
    ValidationError,
)
from custom_components.salesquest.helpers.retry_helpers import async_with_retry

SLEEP = "custom_components.salesquest.helpers.retry_helpers.asyncio.sleep"


async def test_returns_on_first_success() -> None:
    """No retry when the call succeeds."""
    func = AsyncMock(return_value="ok")
    with patch(SLEEP, new=AsyncMock()) as mock_sleep:
        assert await async_with_retry(func, 1, key="v") == "ok"
    func.assert_awaited_once_with(1, key="v")
    mock_sleep.assert_not_called()


async def test_retries_transient_failures_with_backoff() -> None:
    """Transient failures are retried with growing delays."""
    func = AsyncMock(
        side_effect=[TransientStoreError("a"), TransientStoreError("b"), "done"]
    )
    on_retry = MagicMock()
    with patch(SLEEP, new=AsyncMock()) as mock_sleep:
        result = await async_with_retry(
            func, attempts=3, initial_delay=1.0, backoff=2.0, on_retry=on_retry
        )

    assert result == "done"
    assert [call.args[0] for call in mock_sleep.await_args_list] == [1.0, 2.0]
    assert [call.args[0] for call in on_retry.call_args_list] == [1, 2]


async def test_raises_after_last_attempt() -> None:
    """The last transient failure propagates."""
    func = AsyncMock(side_effect=TransientStoreError("down"))
    with patch(SLEEP, new=AsyncMock()), pytest.raises(TransientStoreError):
        await async_with_retry(func, attempts=2, initial_delay=0)
    assert func.await_count == 2


async def test_other_errors_not_retried() -> None:
    """Validation errors surface on the first attempt."""
    func = AsyncMock(side_effect=ValidationError("bad"))
    with patch(SLEEP, new=AsyncMock()), pytest.raises(ValidationError):
        await async_with_retry(func, attempts=5)
    assert func.await_count == 1


async def test_attempts_floor_of_one() -> None:
    """Zero attempts still calls once."""
    func = AsyncMock(return_value=3)
    assert await async_with_retry(func, attempts=0) == 3
