"""
Theme change frequency tracking.

Counts how often the active theme changes and warns when changes arrive
faster than one frame, which usually means a caller is pushing full theme
replacements where incremental updates would do.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ChangeStats:
    """Aggregate change statistics."""
    count: int
    average_interval_ms: float
    last_change: Optional[float]
    rapid_changes: int


class ThemeChangeTracker:
    """
    Tracks active-theme change frequency.

    Args:
        frame_budget_ms: Intervals shorter than this count as rapid changes
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(self, frame_budget_ms: float = 16.0, clock: Callable[[], float] = time.perf_counter):
        self.frame_budget_ms = frame_budget_ms
        self._clock = clock
        self.count = 0
        self.rapid_changes = 0
        self._average_interval_ms = 0.0
        self._last_change: Optional[float] = None

    def record(self, theme_id: str = "") -> float:
        """
        Record one change. Returns the interval since the previous change in
        ms (0.0 for the first change).
        """
        now = self._clock()
        interval_ms = 0.0
        if self._last_change is not None:
            interval_ms = (now - self._last_change) * 1000
            intervals = self.count  # including this one
            self._average_interval_ms += (interval_ms - self._average_interval_ms) / intervals
            if interval_ms < self.frame_budget_ms:
                self.rapid_changes += 1
                logger.warning(
                    f"Theme '{theme_id}' changed {interval_ms:.1f}ms after the previous change "
                    f"(frame budget {self.frame_budget_ms:g}ms)")
        self.count += 1
        self._last_change = now
        return interval_ms

    @property
    def average_interval_ms(self) -> float:
        return self._average_interval_ms

    def stats(self) -> ChangeStats:
        return ChangeStats(self.count, self._average_interval_ms, self._last_change, self.rapid_changes)

    def reset(self) -> None:
        self.count = 0
        self.rapid_changes = 0
        self._average_interval_ms = 0.0
        self._last_change = None
