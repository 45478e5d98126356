"""Timeout wrapper for store round trips."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from conceptdeck.exceptions import StoreTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def bounded(operation: str, awaitable: Awaitable[T], timeout: float | None) -> T:
    """
    Await a store call, giving up after ``timeout`` seconds.

    There is no retry: a timed-out write may or may not have been applied,
    and the next snapshot from the store is the source of truth.

    Args:
        operation: Name used in the error and the log event
        awaitable: The store call
        timeout: Seconds to wait, or None to wait indefinitely

    Raises:
        StoreTimeoutError: If the call did not complete in time
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except TimeoutError as e:
        logger.warning("store_call_timed_out", operation=operation, timeout=timeout)
        raise StoreTimeoutError(operation, timeout) from e
