"""Cooperative cancellation tokens and the timeout merger.

A :class:`CancelToken` is the caller-facing signal: anyone holding it may
call :meth:`CancelToken.cancel`, and in-flight requests observe it through
:func:`run_cancellable`.

Every request gets its own merged token (caller token + per-request timeout)::

    with merged_cancellation(signal, timeout_ms) as token:
        await run_cancellable(do_request(), token)

Leaving the ``with`` block always cancels the timer and detaches the
listener from the caller's token.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from toolwire.protocols.errors import CallCancelledError

T = TypeVar("T")

REASON_CANCELLED = "cancelled"
REASON_TIMEOUT = "timeout"


class CancelToken:
    """A one-shot cancellation signal with listener callbacks."""

    def __init__(self) -> None:
        self._reason: str | None = None
        self._callbacks: list[Callable[[str], None]] = []
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    @property
    def listener_count(self) -> int:
        return len(self._callbacks)

    def cancel(self, reason: str = REASON_CANCELLED) -> None:
        """Cancel the token; later calls are ignored."""
        if self._reason is not None:
            return
        self._reason = reason
        self._event.set()
        for callback in list(self._callbacks):
            callback(reason)
        self._callbacks.clear()

    def add_callback(self, callback: Callable[[str], None]) -> None:
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[str], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def wait(self) -> str:
        await self._event.wait()
        assert self._reason is not None
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._reason is not None:
            raise CallCancelledError(self._reason)


class MergedCancellation:
    """A token cancelled by its parent or by a timer, plus its cleanup."""

    def __init__(self, parent: CancelToken | None, timeout_ms: float) -> None:
        self.token = CancelToken()
        self._parent: CancelToken | None = None
        self._timer: asyncio.TimerHandle | None = None

        if parent is not None:
            if parent.cancelled:
                self.token.cancel(parent.reason or REASON_CANCELLED)
            else:
                parent.add_callback(self._propagate)
                self._parent = parent

        if timeout_ms > 0 and not self.token.cancelled:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(timeout_ms / 1000, self.token.cancel, REASON_TIMEOUT)

    @property
    def pending(self) -> bool:
        """True while a timer or a parent listener is still attached."""
        return self._timer is not None or self._parent is not None

    def cleanup(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._parent is not None:
            self._parent.remove_callback(self._propagate)
            self._parent = None

    def _propagate(self, reason: str) -> None:
        self.token.cancel(reason)


@contextmanager
def merged_cancellation(parent: CancelToken | None, timeout_ms: float) -> Iterator[CancelToken]:
    """Yield a merged token and release its timer and listener on exit."""
    merged = MergedCancellation(parent, timeout_ms)
    try:
        yield merged.token
    finally:
        merged.cleanup()


async def run_cancellable(awaitable: Awaitable[T], token: CancelToken) -> T:
    """Await *awaitable* unless *token* fires first.

    When the token wins, the underlying task is cancelled and awaited before
    :class:`CallCancelledError` is raised, so no partial work outlives the call.
    """
    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        token.raise_if_cancelled()
    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
            await asyncio.wait({task})

    if task in done:
        return task.result()
    raise CallCancelledError(token.reason or REASON_CANCELLED)
