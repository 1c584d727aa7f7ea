"""
Deferred Task Scheduling

Explicit, cancellable scheduled tasks for the draft autosave. The
controller owns a Scheduler and never relies on global timers.
"""

import asyncio
import heapq
import itertools
import threading
from typing import Any, Callable, List, Optional, Protocol


class ScheduledTask(Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs a callback once after a delay (in seconds)."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        ...


class _ManualTask:
    __slots__ = ("when", "seq", "callback", "args", "cancelled")

    def __init__(self, when: float, seq: int, callback: Callable[..., Any], args: tuple):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False

    def __lt__(self, other: "_ManualTask") -> bool:
        return (self.when, self.seq) < (other.when, other.seq)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by a virtual clock.

    Nothing runs until `advance()` moves the clock past a task's due
    time. Used for deterministic hosts and tests.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[_ManualTask] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _ManualTask:
        task = _ManualTask(self.now + max(0.0, delay), next(self._counter), callback, args)
        heapq.heappush(self._queue, task)
        return task

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that are neither run nor cancelled."""
        return sum(1 for task in self._queue if not task.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run every task that falls due.

        Args:
            seconds: Amount of virtual time to elapse

        Returns:
            Number of callbacks run
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0].when <= target:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.now = task.when
            task.callback(*task.args)
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        """Run every pending task regardless of its due time."""
        if not self._queue:
            return 0
        latest = max(task.when for task in self._queue)
        return self.advance(max(0.0, latest - self.now))


class ThreadScheduler:
    """
    Scheduler backed by `threading.Timer`.

    For hosts whose input loop blocks (terminal prompts), where an
    event loop would not get a chance to fire timers.
    """

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> threading.Timer:
        timer = threading.Timer(delay, callback, args)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop's `call_later`.

    Without an explicit loop the running loop is used. Callbacks
    scheduled while no loop is running (synchronous edits) fall back
    to a timer thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._fallback = ThreadScheduler()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return self._fallback.call_later(delay, callback, *args)
        return loop.call_later(delay, callback, *args)
