"""Reusable trailing debounce timer."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.
    The timer is owned by this object and can be cancelled or forced at any time.

    Usage:
        self._debounce = DebounceTimer(delay_ms=1000, handler=self._autosave)

        def on_theme_committed(self):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def is_pending(self) -> bool:
        """True while a trigger is waiting for its quiet window to elapse."""
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Trigger debounce, restarting the quiet window."""
        if self._timer is not None:
            self._timer.stop()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending trigger."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()

    def flush(self) -> bool:
        """Fire the handler now if a trigger is pending. Returns True if it fired."""
        if not self.is_pending():
            return False
        self.force()
        return True

    def _fire(self):
        self._timer = None
        self._handler()
