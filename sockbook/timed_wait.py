"""Keep a periodic deadline across waits that may return early."""

from __future__ import annotations

TIMEOUT = 5000


class WaitTimeout:
    """Milliseconds left before the next periodic task, shrunk by each wait."""

    def __init__(self, period=TIMEOUT):
        if period <= 0:
            raise ValueError("period must be positive")
        self.period = period
        self.timeout = period

    def after_wait(self, ready, elapsed):
        """Account for a wait that reported ``ready`` events after ``elapsed`` seconds.

        Returns True when the periodic task is due; the deadline is then reset.
        """
        if ready == 0:
            self.timeout = self.period
            return True
        self.timeout -= int(elapsed * 1000)
        if self.timeout <= 0:
            self.timeout = self.period
            return True
        return False