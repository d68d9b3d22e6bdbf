"""
Timer Port - Cancellable single-shot delayed callbacks.

The controller uses this for the auto-hide of unmatched cards. The engine
never touches it.

Contract:
- schedule(callback, delay_ms) returns a handle
- cancel(handle) stops the callback if it hasn't run yet
- cancelling a fired or already cancelled handle does nothing

Implementations:
- ThreadingTimerService: threading.Timer per callback
- AsyncioTimerService: loop.call_later on an event loop
- SynchronousTimerService: runs the callback immediately (tests)
- ManualTimerService: callbacks run only when the test advances time
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable
import asyncio
import itertools
import threading

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class TimerHandle:
    """Opaque handle returned by schedule()."""
    delay_ms: int
    handle_id: int = field(default_factory=lambda: next(_handle_ids))
    fired: bool = False
    cancelled: bool = False

    # Backend object (threading.Timer, asyncio.TimerHandle, ...)
    native: Any = None

    @property
    def pending(self) -> bool:
        return not self.fired and not self.cancelled


class TimerService(ABC):
    """Abstract timer port."""

    @abstractmethod
    def schedule(self, callback: Callable[[], None], delay_ms: int) -> TimerHandle:
        """Run `callback` once after `delay_ms` milliseconds."""
        pass

    @abstractmethod
    def cancel(self, handle: TimerHandle | None) -> None:
        """Stop a pending callback. Safe on fired/cancelled/None handles."""
        pass


class ThreadingTimerService(TimerService):
    """
    Background-thread timers.

    Callbacks run on a timer thread; callers must synchronize the state
    the callback touches (GameController holds a lock for this).
    """

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> TimerHandle:
        handle = TimerHandle(delay_ms=delay_ms)

        def run():
            if handle.cancelled:
                return
            handle.fired = True
            callback()

        timer = threading.Timer(max(delay_ms, 0) / 1000.0, run)
        timer.daemon = True
        handle.native = timer
        timer.start()
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None or not handle.pending:
            return
        handle.cancelled = True
        if handle.native is not None:
            handle.native.cancel()


class AsyncioTimerService(TimerService):
    """
    Event-loop timers.

    Callbacks run on the loop thread, so code that only ever runs on that
    loop needs no extra locking.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> TimerHandle:
        handle = TimerHandle(delay_ms=delay_ms)

        def run():
            if handle.cancelled:
                return
            handle.fired = True
            callback()

        handle.native = self._get_loop().call_later(max(delay_ms, 0) / 1000.0, run)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None or not handle.pending:
            return
        handle.cancelled = True
        if handle.native is not None:
            handle.native.cancel()


class SynchronousTimerService(TimerService):
    """Runs every callback immediately, inside schedule()."""

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> TimerHandle:
        handle = TimerHandle(delay_ms=delay_ms)
        handle.fired = True
        callback()
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None and handle.pending:
            handle.cancelled = True


class ManualTimerService(TimerService):
    """
    Test clock: nothing fires until advance() or fire_all() is called.

    Usage:
        timer = ManualTimerService()
        handle = timer.schedule(callback, 2000)
        timer.advance(1999)  # nothing
        timer.advance(1)     # callback runs
    """

    def __init__(self):
        self.now_ms = 0
        self._pending: list[tuple[int, TimerHandle, Callable[[], None]]] = []

    @property
    def pending_count(self) -> int:
        return sum(1 for _, h, _ in self._pending if h.pending)

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> TimerHandle:
        handle = TimerHandle(delay_ms=delay_ms)
        self._pending.append((self.now_ms + max(delay_ms, 0), handle, callback))
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None and handle.pending:
            handle.cancelled = True

    def advance(self, ms: int) -> int:
        """Move the clock forward and run due callbacks in due order."""
        self.now_ms += ms
        return self._run_due(lambda due: due <= self.now_ms)

    def fire_all(self) -> int:
        """Run every pending callback regardless of its delay."""
        return self._run_due(lambda due: True)

    def _run_due(self, is_due: Callable[[int], bool]) -> int:
        fired = 0
        due_entries = sorted(
            (e for e in self._pending if is_due(e[0])),
            key=lambda e: (e[0], e[1].handle_id),
        )
        self._pending = [e for e in self._pending if not is_due(e[0])]
        for _, handle, callback in due_entries:
            if not handle.pending:
                continue
            handle.fired = True
            callback()
            fired += 1
        return fired
