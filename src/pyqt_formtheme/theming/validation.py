"""
Theme validation.

Structural validation of a candidate Theme. Validation is accumulating: every
violation is collected into a ValidationResult so callers can show all
problems at once. Validation errors are values, never raised.

A separate, non-blocking accessibility audit checks body text sizes and the
primary text/background contrast against the theme's own accessibility
settings.
"""

import dataclasses
import logging
import math
import numbers
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from wcag_contrast_ratio.contrast import rgb as wcag_rgb

from pyqt_formtheme.theming.colors import is_valid_color, parse_color, to_rgb01
from pyqt_formtheme.theming.models import BODY_ELEMENTS, FontRoleName, Theme

logger = logging.getLogger(__name__)

# Lower bounds enforced on accessibility settings
MIN_BODY_SIZE_FLOOR = 12.0
MIN_CONTRAST_RATIO_FLOOR = 3.0

FONT_WEIGHT_RANGE = (100, 900)
REM_PX = 16.0

_DIMENSION_RE = re.compile(r"^\d*\.?\d+(px|em|rem|%|vh|vw|pt)?$")


@dataclass
class ValidationError:
    """One validation problem: dotted field path, message and offending value."""

    field: str
    message: str
    value: Any = None


@dataclass
class ValidationResult:
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Join all messages into one human-readable string."""
        return ", ".join(e.message for e in self.errors)

    def extend(self, errors: List[ValidationError]) -> None:
        self.errors.extend(errors)


def _is_number(value: Any) -> bool:
    # Finite reals only, bool excluded
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


class ThemeValidator:
    """Accumulating validator for Theme candidates."""

    def validate(self, theme: Theme) -> ValidationResult:
        result = ValidationResult()
        errors = result.errors

        if not isinstance(theme.id, str) or not theme.id.strip():
            errors.append(ValidationError("id", "Theme ID is required", theme.id))
        if not isinstance(theme.name, str) or not theme.name.strip():
            errors.append(ValidationError("name", "Theme name is required", theme.name))

        self._validate_colors(theme, errors)
        self._validate_typography(theme, errors)
        self._validate_non_negative(theme.spacing, "spacing", "Spacing", errors)
        self._validate_non_negative(theme.border_radius, "border_radius", "Border radius", errors)
        self._validate_transitions(theme, errors)
        self._validate_z_index(theme, errors)
        self._validate_breakpoints(theme, errors)

        if theme.advanced_typography is not None:
            self._validate_advanced_typography(theme, errors)

        if errors:
            logger.debug(f"Theme '{theme.id}' failed validation with {len(errors)} error(s)")
        return result

    # ========== GROUP CHECKS ==========

    def _validate_colors(self, theme: Theme, errors: List[ValidationError]) -> None:
        for f in dataclasses.fields(theme.colors):
            value = getattr(theme.colors, f.name)
            if not is_valid_color(value):
                errors.append(ValidationError(f"colors.{f.name}", f"Invalid color format: {value}", value))

    def _validate_typography(self, theme: Theme, errors: List[ValidationError]) -> None:
        typography = theme.typography
        for f in dataclasses.fields(typography):
            path = f"typography.{f.name}"
            value = getattr(typography, f.name)
            if f.name.startswith("font_family"):
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(path, "Font family must be a non-empty string", value))
            elif f.name.startswith("font_size"):
                self._check_positive(path, value, "Font size", errors)
            elif f.name.startswith("font_weight"):
                self._check_weight(path, value, errors)
            elif f.name.startswith("line_height"):
                self._check_positive(path, value, "Line height", errors)
            elif f.name.startswith("letter_spacing"):
                if not _is_number(value):
                    errors.append(ValidationError(path, f"Letter spacing must be a number: {value}", value))

    def _validate_non_negative(self, group: Any, prefix: str, label: str,
                               errors: List[ValidationError]) -> None:
        for f in dataclasses.fields(group):
            value = getattr(group, f.name)
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    f"{prefix}.{f.name}", f"{label} must be a non-negative number: {value}", value))

    def _validate_transitions(self, theme: Theme, errors: List[ValidationError]) -> None:
        transitions = theme.transitions
        for f in dataclasses.fields(transitions):
            value = getattr(transitions, f.name)
            path = f"transitions.{f.name}"
            if f.name.startswith("duration"):
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(path, f"Duration must be a non-negative number: {value}", value))
            elif not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(path, "Easing must be a non-empty string", value))

    def _validate_z_index(self, theme: Theme, errors: List[ValidationError]) -> None:
        for f in dataclasses.fields(theme.z_index):
            if f.name == "auto":
                continue
            value = getattr(theme.z_index, f.name)
            if not isinstance(value, int) or isinstance(value, bool):
                errors.append(ValidationError(f"z_index.{f.name}", f"Z-index must be an integer: {value}", value))

    def _validate_breakpoints(self, theme: Theme, errors: List[ValidationError]) -> None:
        for f in dataclasses.fields(theme.breakpoints):
            value = getattr(theme.breakpoints, f.name)
            if not isinstance(value, str) or not _DIMENSION_RE.match(value.strip()):
                errors.append(ValidationError(
                    f"breakpoints.{f.name}", f"Breakpoint must be a dimension: {value}", value))

    def _validate_advanced_typography(self, theme: Theme, errors: List[ValidationError]) -> None:
        advanced = theme.advanced_typography
        prefix = "advanced_typography"

        for role_name in FontRoleName:
            role = advanced.role(role_name)
            path = f"{prefix}.{role_name.value}"
            if not isinstance(role.family, str) or not role.family.strip():
                errors.append(ValidationError(
                    f"{path}.family", f"Font family for {role_name.value} role is required", role.family))
            if not isinstance(role.fallbacks, list) or not all(isinstance(n, str) for n in role.fallbacks):
                errors.append(ValidationError(
                    f"{path}.fallbacks", "Fallbacks must be a list of family names", role.fallbacks))

        for f in dataclasses.fields(advanced.elements):
            element = getattr(advanced.elements, f.name)
            path = f"{prefix}.elements.{f.name}"
            self._check_positive(f"{path}.size", element.size, "Font size", errors)
            self._check_positive(f"{path}.line_height", element.line_height, "Line height", errors)
            self._check_weight(f"{path}.weight", element.weight, errors)
            if not _is_number(element.letter_spacing):
                errors.append(ValidationError(
                    f"{path}.letter_spacing", f"Letter spacing must be a number: {element.letter_spacing}",
                    element.letter_spacing))

        for f in dataclasses.fields(advanced.responsive):
            self._check_positive(f"{prefix}.responsive.{f.name}", getattr(advanced.responsive, f.name),
                                 "Responsive scale", errors)

        min_body = advanced.accessibility.min_body_size
        if not _is_number(min_body) or min_body < MIN_BODY_SIZE_FLOOR:
            errors.append(ValidationError(
                f"{prefix}.accessibility.min_body_size",
                f"Minimum body size must be at least {MIN_BODY_SIZE_FLOOR:g}px: {min_body}", min_body))

        ratio = advanced.accessibility.contrast_ratio
        if not _is_number(ratio) or ratio < MIN_CONTRAST_RATIO_FLOOR:
            errors.append(ValidationError(
                f"{prefix}.accessibility.contrast_ratio",
                f"Contrast ratio must be at least {MIN_CONTRAST_RATIO_FLOOR:g}: {ratio}", ratio))

        if not isinstance(advanced.performance.preload_fonts, bool):
            errors.append(ValidationError(
                f"{prefix}.performance.preload_fonts", "preload_fonts must be a boolean",
                advanced.performance.preload_fonts))

    # ========== VALUE CHECKS ==========

    @staticmethod
    def _check_positive(path: str, value: Any, label: str, errors: List[ValidationError]) -> None:
        if not _is_number(value) or value <= 0:
            errors.append(ValidationError(path, f"{label} must be a positive number: {value}", value))

    @staticmethod
    def _check_weight(path: str, value: Any, errors: List[ValidationError]) -> None:
        low, high = FONT_WEIGHT_RANGE
        if not _is_number(value) or value < low or value > high:
            errors.append(ValidationError(path, f"Font weight must be between {low}-{high}: {value}", value))


_default_validator = ThemeValidator()


def validate_theme(theme: Theme) -> ValidationResult:
    """Validate a theme with the shared default validator."""
    return _default_validator.validate(theme)


def contrast_ratio(foreground: str, background: str) -> Optional[float]:
    """WCAG contrast ratio between two color strings, or None if either is unparseable."""
    fg = parse_color(foreground)
    bg = parse_color(background)
    if fg is None or bg is None:
        return None
    return wcag_rgb(to_rgb01(fg), to_rgb01(bg))


def audit_accessibility(theme: Theme) -> ValidationResult:
    """
    Non-blocking accessibility audit of a theme's advanced typography.

    Reports body-text element sizes below ``min_body_size`` and a primary
    text/background contrast below ``contrast_ratio``. Themes without
    advanced typography audit clean.
    """
    result = ValidationResult()
    advanced = theme.advanced_typography
    if advanced is None:
        return result

    min_body = advanced.accessibility.min_body_size
    for name in BODY_ELEMENTS:
        element = getattr(advanced.elements, name)
        size_px = element.size * REM_PX
        if size_px < min_body:
            result.errors.append(ValidationError(
                f"advanced_typography.elements.{name}.size",
                f"{name} is {size_px:g}px, below the minimum body size of {min_body:g}px",
                element.size))

    ratio = contrast_ratio(theme.colors.text_primary, theme.colors.background)
    required = advanced.accessibility.contrast_ratio
    if ratio is not None and ratio < required:
        result.errors.append(ValidationError(
            "colors.text_primary",
            f"Text contrast {ratio:.2f}:1 is below the required {required:g}:1",
            theme.colors.text_primary))

    return result
