"""
Core PyQt6 utilities.

Scheduling and timing helpers with no theme knowledge: the trailing
debounce timer, QThread background tasks and performance timing.
"""

from .debounce_timer import DebounceTimer
from .background_task import BackgroundTask, BackgroundTaskPool
from .performance_monitor import PerformanceMonitor, configure_performance_logging, timed, timer

__all__ = [
    "DebounceTimer",
    "BackgroundTask",
    "BackgroundTaskPool",
    "PerformanceMonitor",
    "configure_performance_logging",
    "timed",
    "timer",
]
