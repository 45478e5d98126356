"""Tests for bounded store calls."""

import asyncio

import pytest
from structlog.testing import capture_logs

from conceptdeck.application.common import bounded
from conceptdeck.exceptions import StoreTimeoutError


async def _answer(delay: float = 0) -> int:
    await asyncio.sleep(delay)
    return 42


class TestBounded:
    @pytest.mark.asyncio
    async def test_returns_value_within_timeout(self) -> None:
        assert await bounded("get_shard", _answer(), 1.0) == 42

    @pytest.mark.asyncio
    async def test_no_timeout_waits(self) -> None:
        assert await bounded("get_shard", _answer(0.01), None) == 42

    @pytest.mark.asyncio
    async def test_timeout_raises_store_timeout(self) -> None:
        with capture_logs() as logs, pytest.raises(StoreTimeoutError) as exc_info:
            await bounded("rewrite_shard_concepts", _answer(1), 0.01)

        assert exc_info.value.operation == "rewrite_shard_concepts"
        assert exc_info.value.timeout == 0.01
        assert logs[0]["event"] == "store_call_timed_out"

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self) -> None:
        async def broken() -> None:
            raise RuntimeError("connection reset")

        with pytest.raises(RuntimeError, match="connection reset"):
            await bounded("list_shards", broken(), 1.0)
