"""
Timing Gate
============
Minimum-interval throttle for one update group (player, enemies or
projectiles). The frame loop runs as fast as the display allows; each
group only moves when its own interval has elapsed.
"""

import time
from typing import Callable, Optional


Clock = Callable[[], float]


class TimingGate:
    """
    Permits an update when at least `interval` seconds have passed since
    the last permitted one. A refused check leaves the timer untouched.
    """

    def __init__(self, interval: float, clock: Optional[Clock] = None):
        self.interval = interval
        self.clock = clock or time.perf_counter
        self.last_update = self.clock()

    def ready(self) -> bool:
        """Check and, if permitted, consume this group's update slot."""
        now = self.clock()
        if now - self.last_update >= self.interval:
            self.last_update = now
            return True
        return False

    def reset(self):
        """Restart the interval from now (new level or new game)."""
        self.last_update = self.clock()
