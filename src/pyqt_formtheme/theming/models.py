"""
Theme data model for pyqt-formtheme.

Structured, dataclass-based representation of a form theme: color slots,
legacy (basic) typography, optional advanced typography with font roles and
per-element scales, and the spacing/radius/shadow/transition/z-index/
breakpoint token groups. Instances are treated as immutable values; all
mutation goes through ``dataclasses.replace`` or the merge helpers in
``pyqt_formtheme.theming.serialization``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


def utc_now() -> datetime:
    """Timezone-aware current time used for theme timestamps."""
    return datetime.now(timezone.utc)


@dataclass
class ColorSet:
    """Named color slots of a theme. Values are CSS color strings."""

    # Brand
    primary: str = "#3B82F6"
    primary_hover: str = "#2563EB"
    primary_active: str = "#1D4ED8"
    primary_disabled: str = "#93C5FD"
    secondary: str = "#6B7280"
    secondary_hover: str = "#4B5563"
    secondary_active: str = "#374151"

    # Surfaces
    background: str = "#FFFFFF"
    surface: str = "#F9FAFB"
    surface_elevated: str = "#FFFFFF"
    overlay: str = "rgba(0, 0, 0, 0.5)"

    # Text
    text_primary: str = "#111827"
    text_secondary: str = "#4B5563"
    text_muted: str = "#6B7280"
    text_inverse: str = "#FFFFFF"

    # Borders
    border: str = "#D1D5DB"
    border_hover: str = "#9CA3AF"
    border_focus: str = "#3B82F6"
    border_error: str = "#EF4444"
    border_success: str = "#10B981"

    # Status
    error: str = "#EF4444"
    error_hover: str = "#DC2626"
    success: str = "#10B981"
    success_hover: str = "#059669"
    warning: str = "#F59E0B"
    warning_hover: str = "#D97706"
    info: str = "#3B82F6"
    info_hover: str = "#2563EB"


@dataclass
class BasicTypography:
    """
    Legacy typography tokens.

    Kept for backward compatibility with themes created before advanced
    typography existed. ``font_family`` is re-derived from the primary font
    role whenever that role changes.
    """

    font_family: str = "Inter, system-ui, sans-serif"
    font_family_mono: str = "'JetBrains Mono', Menlo, monospace"

    # Sizes in rem
    font_size_xs: float = 0.75
    font_size_sm: float = 0.875
    font_size_base: float = 1.0
    font_size_lg: float = 1.125
    font_size_xl: float = 1.25
    font_size_2xl: float = 1.5
    font_size_3xl: float = 1.875
    font_size_4xl: float = 2.25

    font_weight_light: int = 300
    font_weight_normal: int = 400
    font_weight_medium: int = 500
    font_weight_semibold: int = 600
    font_weight_bold: int = 700

    line_height_tight: float = 1.25
    line_height_normal: float = 1.5
    line_height_relaxed: float = 1.625
    line_height_loose: float = 2.0

    # Letter spacing in em
    letter_spacing_tighter: float = -0.05
    letter_spacing_tight: float = -0.025
    letter_spacing_normal: float = 0.0
    letter_spacing_wide: float = 0.025
    letter_spacing_wider: float = 0.05


class FontRoleName(Enum):
    """The independently configurable font roles."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MONO = "mono"


@dataclass
class FontRole:
    """A font family with its ordered fallback chain."""

    family: str = "Inter"
    fallbacks: List[str] = field(default_factory=lambda: ["system-ui", "sans-serif"])
    is_external: bool = False
    source: Optional[str] = None  # URL or file locator for externally hosted fonts

    def font_stack(self) -> str:
        """Render family + fallbacks as a CSS font-family list."""
        names = [self.family, *self.fallbacks]
        return ", ".join(_quote_family(name) for name in names if name)


def _quote_family(name: str) -> str:
    name = name.strip()
    if " " in name and not (name.startswith(("'", '"'))):
        return f"'{name}'"
    return name


class FontLoadingStatus(Enum):
    """Per-family font loading lifecycle tag."""
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not FontLoadingStatus.LOADING


@dataclass
class ElementTypography:
    """Size (rem), line height, letter spacing (em) and weight of one UI element type."""

    size: float = 1.0
    line_height: float = 1.5
    letter_spacing: float = 0.0
    weight: int = 400


@dataclass
class ElementScale:
    """Typography for each UI element type rendered by a form."""

    form_title: ElementTypography = field(
        default_factory=lambda: ElementTypography(2.25, 1.2, -0.025, 700))
    section_title: ElementTypography = field(
        default_factory=lambda: ElementTypography(1.5, 1.3, -0.0125, 600))
    question_label: ElementTypography = field(
        default_factory=lambda: ElementTypography(1.125, 1.4, 0.0, 500))
    question_description: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.875, 1.5, 0.0, 400))
    input_text: ElementTypography = field(
        default_factory=lambda: ElementTypography(1.0, 1.5, 0.0, 400))
    button_text: ElementTypography = field(
        default_factory=lambda: ElementTypography(1.0, 1.25, 0.025, 600))
    help_text: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.875, 1.4, 0.0, 400))
    error_text: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.875, 1.4, 0.0, 500))
    success_text: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.875, 1.4, 0.0, 500))
    caption: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.75, 1.4, 0.025, 400))
    legal: ElementTypography = field(
        default_factory=lambda: ElementTypography(0.75, 1.6, 0.0, 400))


# Element types whose text is body copy for accessibility purposes
BODY_ELEMENTS: Tuple[str, ...] = (
    "question_label",
    "question_description",
    "input_text",
    "help_text",
)


@dataclass
class ResponsiveScale:
    """Multipliers applied to element sizes per viewport class."""

    mobile: float = 0.875
    tablet: float = 0.9375
    desktop: float = 1.0


@dataclass
class AccessibilitySettings:
    min_body_size: float = 14.0   # px
    contrast_ratio: float = 4.5


@dataclass
class PerformanceSettings:
    preload_fonts: bool = False


@dataclass
class AdvancedTypography:
    """Font roles, per-element typography and typography policies."""

    primary: FontRole = field(default_factory=FontRole)
    secondary: FontRole = field(
        default_factory=lambda: FontRole("Georgia", ["Cambria", "serif"]))
    mono: FontRole = field(
        default_factory=lambda: FontRole("JetBrains Mono", ["Menlo", "monospace"]))
    elements: ElementScale = field(default_factory=ElementScale)
    responsive: ResponsiveScale = field(default_factory=ResponsiveScale)
    accessibility: AccessibilitySettings = field(default_factory=AccessibilitySettings)
    performance: PerformanceSettings = field(default_factory=PerformanceSettings)

    def role(self, name: FontRoleName) -> FontRole:
        return getattr(self, name.value)

    def external_roles(self) -> List[FontRole]:
        """Externally hosted roles, de-duplicated by family, in role order."""
        seen = set()
        roles = []
        for name in FontRoleName:
            role = self.role(name)
            if role.is_external and role.family and role.family not in seen:
                seen.add(role.family)
                roles.append(role)
        return roles


@dataclass
class SpacingSet:
    """Spacing scale in rem."""

    unit: float = 0.25
    xs: float = 0.25
    sm: float = 0.5
    md: float = 1.0
    lg: float = 1.5
    xl: float = 2.0
    x2l: float = 3.0
    x3l: float = 4.0
    x4l: float = 5.0
    x5l: float = 6.0
    x6l: float = 8.0


@dataclass
class BorderRadiusSet:
    none: float = 0          # px
    sm: float = 0.125        # rem
    md: float = 0.375
    lg: float = 0.5
    xl: float = 0.75
    full: float = 9999       # px


@dataclass
class ShadowSet:
    none: str = "none"
    sm: str = "0 1px 2px 0 rgba(0, 0, 0, 0.05)"
    md: str = "0 4px 6px -1px rgba(0, 0, 0, 0.1)"
    lg: str = "0 10px 15px -3px rgba(0, 0, 0, 0.1)"
    xl: str = "0 20px 25px -5px rgba(0, 0, 0, 0.1)"
    x2l: str = "0 25px 50px -12px rgba(0, 0, 0, 0.25)"
    inner: str = "inset 0 2px 4px 0 rgba(0, 0, 0, 0.06)"


@dataclass
class TransitionSet:
    duration_fast: int = 150     # ms
    duration_normal: int = 300
    duration_slow: int = 500
    easing_linear: str = "linear"
    easing_ease_in: str = "cubic-bezier(0.4, 0, 1, 1)"
    easing_ease_out: str = "cubic-bezier(0, 0, 0.2, 1)"
    easing_ease_in_out: str = "cubic-bezier(0.4, 0, 0.2, 1)"
    easing_bounce: str = "cubic-bezier(0.68, -0.55, 0.265, 1.55)"
    easing_elastic: str = "cubic-bezier(0.175, 0.885, 0.32, 1.275)"


@dataclass
class ZIndexSet:
    auto: str = "auto"
    base: int = 0
    dropdown: int = 1000
    modal: int = 1050
    popover: int = 1060
    tooltip: int = 1070
    toast: int = 1080
    overlay: int = 1090


@dataclass
class Breakpoints:
    sm: str = "640px"
    md: str = "768px"
    lg: str = "1024px"
    xl: str = "1280px"
    x2l: str = "1536px"


@dataclass
class Theme:
    """
    Complete visual configuration of a form.

    ``advanced_typography`` is optional; themes without it compile only the
    base property set and reject typography-role updates.
    """

    id: str = "default"
    name: str = "Default"
    description: str = ""
    is_dark: bool = False
    is_custom: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    colors: ColorSet = field(default_factory=ColorSet)
    typography: BasicTypography = field(default_factory=BasicTypography)
    advanced_typography: Optional[AdvancedTypography] = None
    spacing: SpacingSet = field(default_factory=SpacingSet)
    border_radius: BorderRadiusSet = field(default_factory=BorderRadiusSet)
    shadows: ShadowSet = field(default_factory=ShadowSet)
    transitions: TransitionSet = field(default_factory=TransitionSet)
    z_index: ZIndexSet = field(default_factory=ZIndexSet)
    breakpoints: Breakpoints = field(default_factory=Breakpoints)
