"""Session lifecycle: one ``initialize`` handshake per endpoint.

The session is an explicit tagged state::

    Uninitialized --ensure_ready--> Initializing(endpoint, handshake) --ok--> Ready(endpoint)
          ^                                   |                                    |
          +------------- failure -------------+------ endpoint changed ------------+

All transitions run synchronously between ``await`` points, so on a single
event loop each one is atomic; the loop itself is the exclusive owner of
the state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from toolwire.protocols.mcp.cancellation import CancelToken, run_cancellable

logger = logging.getLogger(__name__)

Handshake = Callable[[str, CancelToken | None], Awaitable[None]]


@dataclass(frozen=True)
class Uninitialized:
    pass


@dataclass(frozen=True)
class Initializing:
    endpoint: str
    handshake: asyncio.Task[None]


@dataclass(frozen=True)
class Ready:
    endpoint: str


SessionState = Uninitialized | Initializing | Ready


class SessionManager:
    """Runs the handshake on first use and shares it between concurrent callers."""

    def __init__(self, handshake: Handshake) -> None:
        self._handshake = handshake
        self._state: SessionState = Uninitialized()

    @property
    def state(self) -> SessionState:
        return self._state

    def reset(self) -> None:
        self._state = Uninitialized()

    async def ensure_ready(self, endpoint: str, signal: CancelToken | None = None) -> None:
        """Return once a handshake against *endpoint* has succeeded.

        Callers arriving while a handshake is in flight wait for that same
        attempt and see its outcome, success or failure. A joining caller's
        *signal* only ends its own wait; the attempt runs on under the
        signal of the caller that started it.
        """
        if signal is not None:
            signal.raise_if_cancelled()

        state = self._state
        if not isinstance(state, Uninitialized) and state.endpoint != endpoint:
            logger.debug("MCP endpoint changed; resetting session")
            state = self._state = Uninitialized()

        if isinstance(state, Ready):
            return

        if isinstance(state, Initializing):
            pending = state.handshake
        else:
            pending = asyncio.create_task(self._run(endpoint, signal))
            pending.add_done_callback(_mark_retrieved)
            self._state = Initializing(endpoint, pending)

        # Shielded: one caller going away must not abort the shared attempt.
        if signal is None:
            await asyncio.shield(pending)
        else:
            await run_cancellable(asyncio.shield(pending), signal)

    async def _run(self, endpoint: str, signal: CancelToken | None) -> None:
        logger.debug("MCP handshake starting")
        try:
            await self._handshake(endpoint, signal)
        except BaseException:
            self._settle(endpoint, Uninitialized())
            raise
        self._settle(endpoint, Ready(endpoint))
        logger.debug("MCP handshake complete")

    def _settle(self, endpoint: str, new_state: SessionState) -> None:
        # A handshake superseded by an endpoint change leaves the newer state alone.
        current = self._state
        if (
            isinstance(current, Initializing)
            and current.endpoint == endpoint
            and current.handshake is asyncio.current_task()
        ):
            self._state = new_state


def _mark_retrieved(task: asyncio.Task[None]) -> None:
    # Every awaiting caller re-raises the failure; this only silences the
    # loop's "exception was never retrieved" report when all of them left.
    if not task.cancelled():
        task.exception()
