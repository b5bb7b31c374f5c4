"""A hashed timing wheel: timers spread over slots visited one per tick."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

SLOTS = 60
INTERVAL = 1


@dataclass(eq=False)
class WheelTimer:
    """A timer that fires once the wheel has turned ``rotation`` more times
    and reaches ``time_slot``."""

    rotation: int
    time_slot: int
    callback: Optional[Callable[[Any], None]] = None
    user_data: Any = None


class TimeWheel:
    """Timers kept in ``slots`` unordered buckets; one bucket is served per tick."""

    def __init__(self, slots=SLOTS, interval=INTERVAL):
        if slots < 1:
            raise ValueError("a time wheel needs at least one slot")
        if interval <= 0:
            raise ValueError("the slot interval must be positive")
        self.slot_count = slots
        self.interval = interval
        self.cur_slot = 0
        self._slots: list[list[WheelTimer]] = [[] for _ in range(slots)]

    def add_timer(self, timeout, callback=None, user_data=None):
        """Create a timer firing after ``timeout``; ``None`` if it is negative."""
        if timeout < 0:
            return None
        ticks = 1 if timeout < self.interval else int(timeout // self.interval)
        rotation = ticks // self.slot_count
        slot_index = (self.cur_slot + ticks % self.slot_count) % self.slot_count
        timer = WheelTimer(rotation, slot_index, callback, user_data)
        slot = self._slots[slot_index]
        if not slot:
            print(
                f"add timer,rotation is{rotation},ts is{slot_index},"
                f"cur_slot is{self.cur_slot}"
            )
        slot.insert(0, timer)
        return timer

    def del_timer(self, timer):
        """Remove ``timer`` from the wheel without running it."""
        if timer is None:
            return
        slot = self._slots[timer.time_slot]
        if timer not in slot:
            raise ValueError("timer is not in the wheel")
        slot.remove(timer)

    def tick(self):
        """Serve the current slot, firing due timers, then advance one slot."""
        slot = self._slots[self.cur_slot]
        print(f"current slot is{self.cur_slot}")
        for timer in list(slot):
            print("tick the timer once")
            if timer.rotation > 0:
                timer.rotation -= 1
                continue
            if timer.callback is not None:
                timer.callback(timer.user_data)
            if timer in slot:
                if slot[0] is timer:
                    print("delete header in cur_slot")
                slot.remove(timer)
        self.cur_slot = (self.cur_slot + 1) % self.slot_count

    def __len__(self):
        return sum(len(slot) for slot in self._slots)