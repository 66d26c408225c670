"""Deferred Queue: cooperative fixed-delay callbacks for drag cleanup and hover previews.

Invariants:
    - Callbacks never run inside schedule(); only run_due() runs them
    - run_due() runs every callback whose deadline has passed, earliest deadline first,
      ties in scheduling order
    - A cancelled handle never runs
    - Callbacks scheduled by a running callback wait for the next run_due() call

Design Decisions:
    - Injectable clock (milliseconds): tests advance a fake clock instead of sleeping
    - No threads, no asyncio timers: the engine drains due callbacks at the start of each
      input event, which is exactly the ordering an event loop gives
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(order=True)
class DeferredHandle:
    """A scheduled callback. Ordered by (deadline, sequence)."""
    deadline_ms: float
    sequence: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class DeferredQueue:
    """Fixed-delay callbacks drained cooperatively."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._heap: list[DeferredHandle] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return sum(1 for handle in self._heap if not handle.cancelled)

    def schedule(
        self, delay_ms: float, callback: Callable[[], None], name: str = "deferred",
    ) -> DeferredHandle:
        handle = DeferredHandle(
            deadline_ms=self._clock() + max(0.0, delay_ms),
            sequence=next(self._counter),
            name=name,
            callback=callback,
        )
        heapq.heappush(self._heap, handle)
        return handle

    def run_due(self) -> int:
        """Run callbacks whose deadline has passed. Returns how many ran."""
        now = self._clock()
        due: list[DeferredHandle] = []
        while self._heap and self._heap[0].deadline_ms <= now:
            due.append(heapq.heappop(self._heap))

        ran = 0
        for handle in due:
            if handle.cancelled:
                continue
            logger.debug("Running deferred callback %s", handle.name)
            handle.callback()
            ran += 1
        return ran

    def flush(self) -> int:
        """Run everything pending regardless of deadline (shutdown, tests)."""
        ran = 0
        while self._heap:
            pending, self._heap = sorted(self._heap), []
            for handle in pending:
                if not handle.cancelled:
                    handle.callback()
                    ran += 1
        return ran
