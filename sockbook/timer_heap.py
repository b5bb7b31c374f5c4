"""Timers kept in a binary min-heap ordered by absolute expiry time."""

from __future__ import annotations

import time
from dataclasses import InitVar, dataclass, field
from typing import Any, Callable, Optional


@dataclass(eq=False)
class HeapTimer:
    """A task due ``delay`` seconds after ``now`` (the current time by default)."""

    delay: float
    callback: Optional[Callable[[Any], None]] = None
    user_data: Any = None
    now: InitVar[Optional[float]] = None
    expire: float = field(init=False)

    def __post_init__(self, now):
        self.expire = (time.time() if now is None else now) + self.delay


class TimeHeap:
    """Min-heap of timers; deletion is lazy and only clears the callback."""

    def __init__(self, capacity, timers=None):
        initial = list(timers or [])
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        if capacity < len(initial):
            raise ValueError("capacity is smaller than the initial timers")
        self.capacity = capacity
        self._timers: list[HeapTimer] = initial
        for hole in range((len(initial) - 1) // 2, -1, -1):
            self._percolate_down(hole)

    def add_timer(self, timer):
        """Insert ``timer``, doubling the capacity when the heap is full."""
        if timer is None:
            return
        if len(self._timers) >= self.capacity:
            self.capacity = max(1, 2 * self.capacity)
        timers = self._timers
        timers.append(timer)
        hole = len(timers) - 1
        while hole > 0:
            parent = (hole - 1) // 2
            if timers[parent].expire <= timer.expire:
                break
            timers[hole] = timers[parent]
            hole = parent
        timers[hole] = timer

    def del_timer(self, timer):
        """Cancel ``timer``: it stays in the heap but will run nothing."""
        if timer is None:
            return
        timer.callback = None

    def top(self):
        """The timer that expires first, or ``None`` when empty."""
        return self._timers[0] if self._timers else None

    def pop_timer(self):
        """Remove the timer that expires first."""
        if not self._timers:
            return
        last = self._timers.pop()
        if self._timers:
            self._timers[0] = last
            self._percolate_down(0)

    def tick(self, now=None):
        """Run and remove every timer whose expiry is not after ``now``."""
        current = time.time() if now is None else now
        while self._timers:
            head = self._timers[0]
            if head.expire > current:
                break
            if head.callback is not None:
                head.callback(head.user_data)
            self.pop_timer()

    def empty(self):
        return not self._timers

    def __len__(self):
        return len(self._timers)

    def _percolate_down(self, hole):
        timers = self._timers
        moving = timers[hole]
        last = len(timers) - 1
        while hole * 2 + 1 <= last:
            child = hole * 2 + 1
            if child < last and timers[child + 1].expire < timers[child].expire:
                child += 1
            if timers[child].expire < moving.expire:
                timers[hole] = timers[child]
                hole = child
            else:
                break
        timers[hole] = moving