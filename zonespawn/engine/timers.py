"""Deterministic timer facility driven by a virtual millisecond clock."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduledTask:
    """A one-shot or repeating callback registered with a :class:`TimerQueue`."""

    task_id: int
    due_ms: int
    callback: Callable[[], None] = field(repr=False)
    interval_ms: int = 0           # 0 = one-shot
    cancelled: bool = False

    @property
    def repeating(self) -> bool:
        return self.interval_ms > 0


class TimerQueue:
    """Heap-ordered callback scheduler.

    Nothing runs on its own: the host calls :meth:`advance` with elapsed
    time and due callbacks execute on the caller's thread, in due-time
    order (ties broken by registration order). Tests drive it exactly like a
    fake clock.
    """

    __slots__ = ("_now_ms", "_heap", "_ids")

    def __init__(self) -> None:
        self._now_ms = 0
        self._heap: list[tuple[int, int, ScheduledTask]] = []
        self._ids = itertools.count(1)

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        return self._push(ScheduledTask(next(self._ids), self._now_ms + max(int(delay_ms), 0), callback))

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        interval_ms = int(interval_ms)
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        task = ScheduledTask(next(self._ids), self._now_ms + interval_ms, callback, interval_ms=interval_ms)
        return self._push(task)

    def cancel(self, task: ScheduledTask) -> None:
        task.cancelled = True

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run everything that came due. Returns callbacks run."""
        return self.advance_ms(round(seconds * 1000))

    def advance_ms(self, delta_ms: int) -> int:
        target = self._now_ms + max(int(delta_ms), 0)
        ran = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            self._now_ms = due
            if task.repeating:
                task.due_ms = due + task.interval_ms
                self._push(task)
            task.callback()
            ran += 1
        self._now_ms = target
        return ran

    def clear(self) -> None:
        for _, _, task in self._heap:
            task.cancelled = True
        self._heap.clear()

    def _push(self, task: ScheduledTask) -> ScheduledTask:
        heapq.heappush(self._heap, (task.due_ms, next(self._ids), task))
        return task
