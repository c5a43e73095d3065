"""
Deadline handling for asynchronous operations.

This module provides the single cancellation primitive used by the checkers:
an awaitable is raced against a timer, and when the timer wins the awaitable
is cancelled so that its own cleanup code closes any socket it opened.
"""

import asyncio
import time
from typing import Awaitable, TypeVar

from uptime_probe.errors import format_number

T = TypeVar("T")


class OperationTimeoutError(TimeoutError):
    """
    Raised by with_timeout when the deadline elapses before the operation settles.

    Attributes:
        timeout_ms: The configured deadline in milliseconds.
    """

    def __init__(self, timeout_ms: float) -> None:
        super().__init__(f"Operation timed out after {format_number(timeout_ms)}ms")
        self.timeout_ms: float = timeout_ms


async def with_timeout(operation: Awaitable[T], ms: float) -> T:
    """
    Awaits an operation for at most the given number of milliseconds.

    Args:
        operation: The coroutine or future to await.
        ms: The deadline in milliseconds, strictly positive.

    Returns:
        The operation's result when it settles first.

    Raises:
        OperationTimeoutError: If the deadline elapses first. The operation has
            been cancelled by then.
        ValueError: If ms is not strictly positive.
    """
    if ms <= 0:
        if asyncio.iscoroutine(operation):
            operation.close()
        raise ValueError(f"Timeout must be strictly positive, got {ms}")

    try:
        return await asyncio.wait_for(operation, timeout=ms / 1000)
    except asyncio.TimeoutError as err:
        if isinstance(err, OperationTimeoutError):
            raise
        raise OperationTimeoutError(ms) from err


def elapsed_ms(start_time: float) -> int:
    """Returns the whole milliseconds elapsed since a time.perf_counter() reading."""
    return max(0, round((time.perf_counter() - start_time) * 1000))
