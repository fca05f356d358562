"""
Cache Time Base

All cache ages are whole seconds elapsed since a single process-start epoch.
"""

import time
from typing import Callable, Optional


class ProcessClock:
    """Elapsed-seconds clock anchored at construction time"""

    def __init__(
        self,
        epoch: Optional[float] = None,
        time_source: Callable[[], float] = time.time,
    ):
        self._time_source = time_source
        self.epoch = time_source() if epoch is None else epoch

    def to_score(self, timestamp: float) -> int:
        """Convert an absolute timestamp to non-negative seconds since epoch"""
        return max(0, int(timestamp - self.epoch))

    def now(self) -> int:
        return self.to_score(self._time_source())


_process_clock: Optional[ProcessClock] = None


def get_process_clock() -> ProcessClock:
    """Get the shared clock, created on first use"""
    global _process_clock
    if _process_clock is None:
        _process_clock = ProcessClock()
    return _process_clock
