"""
Theme model and styling.

Theme data model, built-in themes, validation, (de)serialization,
property compilation and the Qt/CSS projections of compiled properties.
"""

from .models import Theme, ColorSet, BasicTypography, AdvancedTypography, FontRole, FontRoleName, FontLoadingStatus
from .exceptions import ConfigurationError, ResourceLoadError
from .validation import ValidationError, ValidationResult, validate_theme, audit_accessibility
from .serialization import theme_from_dict, theme_to_dict, theme_from_json, theme_to_json, merge_changes
from .defaults import (
    create_default_theme,
    create_dark_theme,
    get_font_combinations,
    get_typography_scales,
    apply_typography_scale,
    THEME_COLLECTIONS,
)
from .property_compiler import PropertyCompiler, CompiledProperties, compile_properties
from .style_generator import StyleSheetGenerator, generate_css_text
from .palette_manager import PaletteManager
from .surfaces import MemorySurface, CssTextSurface, QtStyleSurface
from .responsive import ViewportClass, viewport_class, responsive_multiplier

__all__ = [
    "Theme",
    "ColorSet",
    "BasicTypography",
    "AdvancedTypography",
    "FontRole",
    "FontRoleName",
    "FontLoadingStatus",
    "ConfigurationError",
    "ResourceLoadError",
    "ValidationError",
    "ValidationResult",
    "validate_theme",
    "audit_accessibility",
    "theme_from_dict",
    "theme_to_dict",
    "theme_from_json",
    "theme_to_json",
    "merge_changes",
    "create_default_theme",
    "create_dark_theme",
    "get_font_combinations",
    "get_typography_scales",
    "apply_typography_scale",
    "THEME_COLLECTIONS",
    "PropertyCompiler",
    "CompiledProperties",
    "compile_properties",
    "StyleSheetGenerator",
    "generate_css_text",
    "PaletteManager",
    "MemorySurface",
    "CssTextSurface",
    "QtStyleSurface",
    "ViewportClass",
    "viewport_class",
    "responsive_multiplier",
]
