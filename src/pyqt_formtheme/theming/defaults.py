"""
Built-in themes and typography presets.

Light (default) and dark theme factories, curated font combinations, named
typography scales and the theme collections offered by the design panel.
Factories always return fresh instances.
"""

import dataclasses
import logging
from typing import Callable, Dict, List

from pyqt_formtheme.theming.models import (
    AccessibilitySettings,
    AdvancedTypography,
    ColorSet,
    ElementScale,
    FontRole,
    Theme,
    utc_now,
)

logger = logging.getLogger(__name__)

DEFAULT_THEME_ID = "default"
DARK_THEME_ID = "dark"


def create_default_theme() -> Theme:
    """Create the built-in light theme (with advanced typography, no external fonts)."""
    now = utc_now()
    return Theme(
        id=DEFAULT_THEME_ID,
        name="Default Light",
        description="Clean light theme for forms",
        is_dark=False,
        is_custom=False,
        created_at=now,
        updated_at=now,
        advanced_typography=AdvancedTypography(),
    )


def create_dark_theme() -> Theme:
    """
    Create the built-in dark theme.

    Colors are adjusted for dark backgrounds; all other tokens are shared
    with the light theme.
    """
    theme = create_default_theme()
    return dataclasses.replace(
        theme,
        id=DARK_THEME_ID,
        name="Default Dark",
        description="High-contrast dark theme for forms",
        is_dark=True,
        colors=ColorSet(
            primary="#60A5FA",
            primary_hover="#3B82F6",
            primary_active="#2563EB",
            primary_disabled="#1E3A8A",
            secondary="#9CA3AF",
            secondary_hover="#D1D5DB",
            secondary_active="#E5E7EB",
            background="#111827",
            surface="#1F2937",
            surface_elevated="#374151",
            overlay="rgba(0, 0, 0, 0.7)",
            text_primary="#F9FAFB",
            text_secondary="#D1D5DB",
            text_muted="#9CA3AF",
            text_inverse="#111827",
            border="#374151",
            border_hover="#4B5563",
            border_focus="#60A5FA",
            border_error="#F87171",
            border_success="#34D399",
            error="#F87171",
            error_hover="#EF4444",
            success="#34D399",
            success_hover="#10B981",
            warning="#FBBF24",
            warning_hover="#F59E0B",
            info="#60A5FA",
            info_hover="#3B82F6",
        ),
    )


# ========== FONT COMBINATIONS ==========

# (name, primary role, secondary role) pairings offered in the typography panel
_FONT_COMBINATIONS = [
    ("Modern", FontRole("Inter", ["system-ui", "sans-serif"], is_external=True),
     FontRole("Merriweather", ["Georgia", "serif"], is_external=True)),
    ("Classic", FontRole("Georgia", ["Cambria", "serif"]),
     FontRole("Helvetica", ["Arial", "sans-serif"])),
    ("Friendly", FontRole("Nunito", ["system-ui", "sans-serif"], is_external=True),
     FontRole("Lora", ["Georgia", "serif"], is_external=True)),
    ("Technical", FontRole("Roboto", ["system-ui", "sans-serif"], is_external=True),
     FontRole("Roboto Slab", ["Georgia", "serif"], is_external=True)),
    ("System", FontRole("system-ui", ["-apple-system", "Segoe UI", "sans-serif"]),
     FontRole("Georgia", ["serif"])),
]


def get_font_combinations() -> List[Dict[str, FontRole]]:
    """Return curated primary/secondary font pairings."""
    return [
        {"name": name, "primary": dataclasses.replace(primary, fallbacks=list(primary.fallbacks)),
         "secondary": dataclasses.replace(secondary, fallbacks=list(secondary.fallbacks))}
        for name, primary, secondary in _FONT_COMBINATIONS
    ]


# ========== TYPOGRAPHY SCALES ==========

TYPOGRAPHY_SCALES: Dict[str, float] = {
    "compact": 0.875,
    "default": 1.0,
    "comfortable": 1.125,
    "large": 1.25,
}


def get_typography_scales() -> Dict[str, float]:
    return dict(TYPOGRAPHY_SCALES)


def scale_elements(elements: ElementScale, factor: float) -> ElementScale:
    """Return a copy of ``elements`` with every size multiplied by ``factor``."""
    scaled = {
        f.name: dataclasses.replace(getattr(elements, f.name),
                                    size=round(getattr(elements, f.name).size * factor, 4))
        for f in dataclasses.fields(elements)
    }
    return ElementScale(**scaled)


def apply_typography_scale(theme: Theme, scale_name: str) -> Theme:
    """Return ``theme`` with its element sizes scaled by a named typography scale."""
    if scale_name not in TYPOGRAPHY_SCALES:
        raise KeyError(f"Unknown typography scale '{scale_name}'. Available: {list(TYPOGRAPHY_SCALES)}")
    advanced = theme.advanced_typography or AdvancedTypography()
    advanced = dataclasses.replace(
        advanced, elements=scale_elements(advanced.elements, TYPOGRAPHY_SCALES[scale_name]))
    return dataclasses.replace(theme, advanced_typography=advanced)


# ========== THEMED PRESETS ==========

def create_form_theme() -> Theme:
    """Light theme tuned for long forms: serif descriptions, comfortable scale."""
    theme = apply_typography_scale(create_default_theme(), "comfortable")
    advanced = dataclasses.replace(
        theme.advanced_typography,
        secondary=FontRole("Merriweather", ["Georgia", "serif"]),
    )
    return dataclasses.replace(
        theme, id="form", name="Form Optimized",
        description="Comfortable reading scale for long forms",
        advanced_typography=advanced,
    )


def create_accessibility_theme() -> Theme:
    """High-contrast large-type theme enforcing stricter accessibility settings."""
    theme = apply_typography_scale(create_default_theme(), "large")
    advanced = dataclasses.replace(
        theme.advanced_typography,
        accessibility=AccessibilitySettings(min_body_size=16.0, contrast_ratio=7.0),
    )
    colors = dataclasses.replace(theme.colors, text_primary="#000000", text_secondary="#1F2937",
                                 border="#4B5563")
    return dataclasses.replace(
        theme, id="accessible", name="High Accessibility",
        description="Large type and AAA contrast",
        colors=colors, advanced_typography=advanced,
    )


THEME_COLLECTIONS: Dict[str, Dict[str, Callable[[], Theme]]] = {
    "basic": {
        "light": create_default_theme,
        "dark": create_dark_theme,
    },
    "scales": {
        name: (lambda name=name: apply_typography_scale(create_default_theme(), name))
        for name in TYPOGRAPHY_SCALES
    },
    "presets": {
        "form": create_form_theme,
        "accessible": create_accessibility_theme,
    },
}


# Shared built-in instances. Treat as read-only; use the factories for copies.
DEFAULT_THEME = create_default_theme()
DARK_THEME = create_dark_theme()
