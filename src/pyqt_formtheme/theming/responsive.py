"""
Viewport classification from theme breakpoints.

Widths at or below ``breakpoints.sm`` are mobile, widths below
``breakpoints.lg`` are tablet and anything wider is desktop. The class
selects the responsive multiplier applied to element font sizes.
"""

import dataclasses
import re
from enum import Enum
from typing import Dict

from pyqt_formtheme.theming.models import Breakpoints, Theme

REM_PX = 16.0
PT_PX = 4.0 / 3.0

_BREAKPOINT_RE = re.compile(r"^(\d*\.?\d+)(px|rem|em|pt)?$")


class ViewportClass(Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


def breakpoint_px(value: str) -> float:
    """
    Resolve an absolute breakpoint dimension to px.

    Raises ValueError for viewport-relative units (%, vh, vw) and anything
    that is not a dimension.
    """
    match = _BREAKPOINT_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Breakpoint is not an absolute dimension: {value!r}")
    number = float(match.group(1))
    unit = match.group(2)
    if unit in ("rem", "em"):
        return number * REM_PX
    if unit == "pt":
        return number * PT_PX
    return number


def breakpoint_table(breakpoints: Breakpoints) -> Dict[str, float]:
    """All breakpoints of a theme in px, keyed by name."""
    return {f.name: breakpoint_px(getattr(breakpoints, f.name)) for f in dataclasses.fields(breakpoints)}


def viewport_class(theme: Theme, width_px: float) -> ViewportClass:
    if width_px <= breakpoint_px(theme.breakpoints.sm):
        return ViewportClass.MOBILE
    if width_px < breakpoint_px(theme.breakpoints.lg):
        return ViewportClass.TABLET
    return ViewportClass.DESKTOP


def responsive_multiplier(theme: Theme, width_px: float) -> float:
    """Font-size multiplier for ``width_px``; 1.0 for themes without advanced typography."""
    if theme.advanced_typography is None:
        return 1.0
    return getattr(theme.advanced_typography.responsive, viewport_class(theme, width_px).value)
