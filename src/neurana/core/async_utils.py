"""Async utilities for deadlines and cancellation."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from neurana.core.exceptions import NeuranaError

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


async def run_with_deadline(
    coro: Awaitable[T],
    timeout: float | None,
    cancel_event: asyncio.Event | None = None,
    timeout_message: str = "Request timed out",
) -> T:
    """Run a coroutine under a deadline and an optional cancellation signal.

    The wrapped work is cancelled when the deadline elapses or when
    ``cancel_event`` is set; both surface as a TIMEOUT error. The timer and
    the cancellation watcher are torn down on every exit path.

    Args:
        coro: Coroutine to run
        timeout: Deadline in seconds, or None for no deadline
        cancel_event: Event that aborts the work when set
        timeout_message: Message for the timeout error

    Returns:
        Result of the coroutine

    Raises:
        NeuranaError: TIMEOUT kind when aborted
    """
    if cancel_event is None:
        try:
            return await asyncio.wait_for(coro, timeout=timeout)
        except asyncio.TimeoutError:
            raise NeuranaError.timeout(timeout_message, timeout_seconds=timeout) from None

    if cancel_event.is_set():
        if asyncio.iscoroutine(coro):
            coro.close()
        raise NeuranaError.timeout("Request cancelled")

    work = asyncio.ensure_future(coro)
    watcher = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {work, watcher},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
        if work in done:
            return work.result()
        if watcher in done:
            raise NeuranaError.timeout("Request cancelled")
        raise NeuranaError.timeout(timeout_message, timeout_seconds=timeout)
    finally:
        for task in (work, watcher):
            if not task.done():
                task.cancel()
        await asyncio.gather(work, watcher, return_exceptions=True)
