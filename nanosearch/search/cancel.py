"""Cooperative cancellation for long-running searches."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from nanosearch.search.errors import SearchCancelledError

T = TypeVar("T")


class CancellationToken:
    """
    Externally owned abort signal.

    Searches observe the token but never signal it themselves. Callbacks
    registered with `on_signal` run once, on the thread that calls `signal`.
    """

    def __init__(self) -> None:
        self._signalled = False
        self._callbacks: dict[int, Callable[[], None]] = {}
        self._next_id = 0

    def is_signalled(self) -> bool:
        return self._signalled

    def signal(self) -> None:
        if self._signalled:
            return
        self._signalled = True
        callbacks = list(self._callbacks.values())
        self._callbacks.clear()
        for callback in callbacks:
            _invoke(callback)

    def on_signal(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a one-shot callback and return its unsubscribe function."""
        if self._signalled:
            _invoke(callback)
            return lambda: None

        handle = self._next_id
        self._next_id += 1
        self._callbacks[handle] = callback

        def unsubscribe() -> None:
            self._callbacks.pop(handle, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)


def _invoke(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception as e:
        logger.error("Cancellation callback failed: {}", e)


def raise_if_cancelled(cancel: CancellationToken | None) -> None:
    """Phase boundary check."""
    if cancel is not None and cancel.is_signalled():
        raise SearchCancelledError()


async def run_cancellable(
    awaitable: Awaitable[T],
    cancel: CancellationToken | None,
) -> T:
    """
    Await `awaitable`, aborting it when `cancel` fires.

    The awaitable runs in its own task so a signal can interrupt whatever it is
    currently waiting on. The subscription is released when this call returns.

    Raises:
        SearchCancelledError: If the token fired before or during the call.
    """
    if cancel is None:
        return await awaitable

    if cancel.is_signalled():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise SearchCancelledError()

    task = asyncio.ensure_future(awaitable)
    unsubscribe = cancel.on_signal(task.cancel)
    try:
        return await task
    except asyncio.CancelledError:
        if cancel.is_signalled():
            raise SearchCancelledError() from None
        raise
    finally:
        unsubscribe()
