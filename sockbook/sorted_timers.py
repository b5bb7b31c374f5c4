"""Timers kept in ascending order of expiry time."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(eq=False)
class Timer:
    """A task to run once the absolute time ``expire`` is reached."""

    expire: float
    callback: Optional[Callable[[Any], None]] = None
    user_data: Any = None


class SortedTimerList:
    """Ascending list of timers; timers with equal expiry keep insertion order."""

    def __init__(self):
        self._timers: list[Timer] = []

    def add_timer(self, timer):
        """Insert ``timer`` after every timer that expires no later."""
        if timer is None:
            return
        if not self._timers or timer.expire < self._timers[0].expire:
            self._timers.insert(0, timer)
            return
        self._insert_after(timer, 0)

    def adjust_timer(self, timer):
        """Move ``timer`` towards the tail after its expiry was extended."""
        if timer is None:
            return
        position = self._position(timer)
        following = position + 1
        if following == len(self._timers) or timer.expire < self._timers[following].expire:
            return
        del self._timers[position]
        self._insert_after(timer, position)

    def del_timer(self, timer):
        """Remove ``timer`` from the list."""
        if timer is None:
            return
        del self._timers[self._position(timer)]

    def tick(self, now=None):
        """Run and remove every timer whose expiry is not after ``now``."""
        if not self._timers:
            return
        print("timer tick")
        current = time.time() if now is None else now
        while self._timers and not current < self._timers[0].expire:
            timer = self._timers.pop(0)
            if timer.callback is not None:
                timer.callback(timer.user_data)

    def __iter__(self):
        return iter(list(self._timers))

    def __len__(self):
        return len(self._timers)

    def _position(self, timer):
        for position, candidate in enumerate(self._timers):
            if candidate is timer:
                return position
        raise ValueError("timer is not in the list")

    def _insert_after(self, timer, anchor):
        """Insert ``timer`` before the first timer past ``anchor`` expiring later."""
        for position in range(anchor + 1, len(self._timers)):
            if timer.expire < self._timers[position].expire:
                self._timers.insert(position, timer)
                return
        self._timers.append(timer)