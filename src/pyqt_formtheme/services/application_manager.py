"""
Application of compiled properties to a rendering surface.

Each engine owns one ApplicationManager. Full property sets are applied
immediately; partial updates are buffered and coalesced into a single write
once the visual quiet window (one frame, 16 ms by default) elapses.
"""

import logging
import re
from typing import Dict, Mapping, Optional
from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formtheme.core.debounce_timer import DebounceTimer
from pyqt_formtheme.core.performance_monitor import timer
from pyqt_formtheme.protocols.property_surface import PropertySurface
from pyqt_formtheme.protocols.theme_config import ThemeEngineConfig, get_theme_config
from pyqt_formtheme.theming.colors import is_valid_color
from pyqt_formtheme.theming.surfaces import MemorySurface
from pyqt_formtheme.theming.validation import ValidationError, ValidationResult

logger = logging.getLogger(__name__)

_DIMENSION_RE = re.compile(r"^-?\d*\.?\d+(px|rem|em|%|vh|vw|pt|ms)?$")
_DIMENSION_PREFIXES = ("font-size-", "spacing-", "border-radius-", "letter-spacing-",
                       "breakpoint-", "transition-duration-")
_DIMENSION_SUFFIXES = ("-size", "-letter-spacing")


def _is_dimension_key(name: str) -> bool:
    if name.startswith(_DIMENSION_PREFIXES):
        return True
    return name.startswith("typography-") and name.endswith(_DIMENSION_SUFFIXES)


def _is_family_key(name: str) -> bool:
    return name.startswith(("font-family", "font-role-"))


class ApplicationManager(QObject):
    """
    Applies compiled properties to a PropertySurface.

    Signals:
        properties_applied(dict): the mapping written to the surface by one
            visible update (the full set for immediate applies, the
            coalesced buffer for incremental ones)
    """

    properties_applied = pyqtSignal(dict)

    def __init__(self, surface: Optional[PropertySurface] = None,
                 config: Optional[ThemeEngineConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or get_theme_config()
        self.surface = surface if surface is not None else MemorySurface()
        self._current: Dict[str, str] = {}
        self._pending: Dict[str, str] = {}
        self._debounce = DebounceTimer(self._config.visual_debounce_ms, self._apply_pending)
        self.application_count = 0

    # ========== APPLY ==========

    def apply_immediate(self, properties: Mapping[str, str]) -> None:
        """Replace the whole applied set in one visible update, dropping any pending buffer."""
        self._debounce.cancel()
        self._pending.clear()

        full = dict(properties)
        removed = set(self._current) - set(full)
        if removed:
            # Surfaces merge, so stale keys are only dropped by clearing first
            self.surface.clear()
        self._write(full)
        self._current = full

    def apply_incremental(self, partial: Mapping[str, str]) -> None:
        """Merge ``partial`` into the pending buffer and restart the quiet window."""
        if not self._current and not self._pending:
            logger.debug("No properties applied yet, incremental update becomes the full set")
        self._pending.update(partial)
        self._debounce.trigger()

    def flush(self) -> bool:
        """Apply the pending buffer now. Returns True if anything was written."""
        return self._debounce.flush()

    def has_pending(self) -> bool:
        return self._debounce.is_pending()

    def _apply_pending(self) -> None:
        if not self._pending:
            return
        pending, self._pending = self._pending, {}
        self._write(pending)
        self._current.update(pending)

    def _write(self, properties: Dict[str, str]) -> None:
        with timer("Apply properties", threshold_ms=self._config.frame_budget_ms,
                   log_args=True, count=len(properties)):
            self.surface.apply(properties)
        self.application_count += 1
        logger.debug(f"Applied {len(properties)} properties (application #{self.application_count})")
        self.properties_applied.emit(dict(properties))

    # ========== INTROSPECTION ==========

    def get_current_properties(self) -> Dict[str, str]:
        """Copy of the last applied set (pending writes excluded)."""
        return dict(self._current)

    def has_properties(self) -> bool:
        return bool(self._current)

    def reset(self) -> None:
        """Drop pending writes and clear the surface."""
        self._debounce.cancel()
        self._pending.clear()
        self._current.clear()
        self.surface.clear()

    # ========== VALIDATION ==========

    def validate_properties(self, properties: Mapping[str, str]) -> ValidationResult:
        """
        Check compiled values at the string level.

        Colors must use a recognized color syntax, lengths a dimension
        syntax, and font family lists must be non-empty.
        """
        result = ValidationResult()
        for name, value in properties.items():
            if not isinstance(value, str):
                result.errors.append(ValidationError(name, f"Property value must be a string: {value!r}", value))
            elif name.startswith("color-"):
                if not is_valid_color(value):
                    result.errors.append(ValidationError(name, f"Invalid color value: {value}", value))
            elif _is_family_key(name):
                if not value.strip():
                    result.errors.append(ValidationError(name, "Font family must not be empty", value))
            elif _is_dimension_key(name):
                if not _DIMENSION_RE.match(value.strip()):
                    result.errors.append(ValidationError(name, f"Invalid dimension value: {value}", value))
        return result
