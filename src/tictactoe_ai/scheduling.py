"""Schedulers used to resume the turn loop after the automated player's thinking delay."""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Optional[Cancellable]: ...


class ImmediateScheduler:
    """Runs the callback right away, ignoring the delay."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        callback(*args)
        return None


class AsyncioScheduler:
    """Defers the callback on an asyncio event loop.

    The loop is looked up lazily so the scheduler can be built before the
    loop starts running.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback, *args)
