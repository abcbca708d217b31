"""
Single per-room turn clock and the schedulers it runs on.
"""

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for a call registered with a scheduler."""

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by hand.

    Time only moves when ``advance`` or ``run_next`` is called, which makes
    timeouts and bot delays reproducible in tests and offline simulation.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        handle = ScheduledCall(callback)
        heapq.heappush(self._queue, (self.now + max(delay, 0.0), next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of calls still due to run."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        if not self._queue:
            return None
        return self._queue[0][0]

    def run_next(self) -> bool:
        """Jump to the earliest pending call and run it. Returns False when idle."""
        self._drop_cancelled()
        if not self._queue:
            return False
        due, _, handle = heapq.heappop(self._queue)
        self.now = max(self.now, due)
        handle.callback()
        return True

    def advance(self, seconds: float) -> int:
        """Move time forward, running every call that falls due. Returns the count run."""
        target = self.now + seconds
        ran = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self.run_next()
            ran += 1
        self.now = target
        return ran

    def run_pending(self, limit: int = 10000) -> int:
        """Run calls until none are left or ``limit`` is hit."""
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class TurnClock:
    """
    The one timer a room owns.

    Arming supersedes whatever was armed before. Besides cancelling the old
    handle, every arming bumps a generation counter and the callback checks
    it before running, so a call that was already queued when it got
    superseded is dropped instead of firing.
    """

    def __init__(self, scheduler):
        self.scheduler = scheduler
        self.generation = 0
        self._handle = None
        self.delay: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, callback: Callable[[], None]) -> int:
        self.cancel()
        generation = self.generation

        def fire():
            if generation != self.generation:
                logger.debug(f"Dropping superseded timer generation {generation}")
                return
            self._handle = None
            self.delay = None
            callback()

        self.delay = delay
        self._handle = self.scheduler.call_later(delay, fire)
        return generation

    def cancel(self) -> None:
        self.generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.delay = None
