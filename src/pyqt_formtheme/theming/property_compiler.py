"""
Compiled property generation.

Projects a Theme onto a flat, ordered mapping of named style values
(``color-primary``, ``font-size-base``, ``spacing-md`` ...). The mapping is
purely derived from the theme and can be recomputed at any time; rendering
surfaces decide how to present it (CSS custom properties, Qt stylesheets,
palettes).
"""

import dataclasses
import logging
from typing import Dict

from pyqt_formtheme.core.performance_monitor import timed
from pyqt_formtheme.theming.models import AdvancedTypography, FontRoleName, Theme

logger = logging.getLogger(__name__)

CompiledProperties = Dict[str, str]


def fmt_number(value) -> str:
    """Format a number the way it appears in a style value (no trailing ``.0``)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def token(field_name: str) -> str:
    """Convert a dataclass field name to a property token (``x2l`` -> ``2xl``, ``_`` -> ``-``)."""
    if field_name.startswith("x") and field_name[1:2].isdigit():
        field_name = field_name[1:]
    return field_name.replace("_", "-")


class PropertyCompiler:
    """
    Compiles Theme objects into CompiledProperties.

    The base block is always emitted. The advanced typography block is
    emitted only for themes that carry advanced typography; if compiling it
    fails, the failure is logged and the block omitted so the base
    properties still reach the surface.
    """

    def compile(self, theme: Theme) -> CompiledProperties:
        properties: CompiledProperties = {}
        properties.update(self.compile_colors(theme))
        properties.update(self.compile_typography(theme))
        properties.update(self.compile_spacing(theme))
        properties.update(self.compile_border_radius(theme))
        properties.update(self.compile_shadows(theme))
        properties.update(self.compile_transitions(theme))
        properties.update(self.compile_z_index(theme))
        properties.update(self.compile_breakpoints(theme))

        if theme.advanced_typography is not None:
            try:
                advanced = self.compile_advanced_typography(theme.advanced_typography)
            except Exception as e:
                logger.warning(f"Skipping advanced typography for theme '{theme.id}': {e}", exc_info=True)
            else:
                properties.update(advanced)

        return properties

    # ========== BASE BLOCK ==========

    def compile_colors(self, theme: Theme) -> CompiledProperties:
        colors = theme.colors
        return {
            f"color-{token(f.name)}": getattr(colors, f.name)
            for f in dataclasses.fields(colors)
        }

    def compile_typography(self, theme: Theme) -> CompiledProperties:
        t = theme.typography
        properties = {
            "font-family": t.font_family,
            "font-family-mono": t.font_family_mono,
        }
        for f in dataclasses.fields(t):
            value = getattr(t, f.name)
            if f.name.startswith("font_size"):
                properties[token(f.name)] = f"{fmt_number(value)}rem"
            elif f.name.startswith("font_weight") or f.name.startswith("line_height"):
                properties[token(f.name)] = fmt_number(value)
            elif f.name.startswith("letter_spacing"):
                properties[token(f.name)] = f"{fmt_number(value)}em"
        return properties

    def compile_spacing(self, theme: Theme) -> CompiledProperties:
        spacing = theme.spacing
        return {
            f"spacing-{token(f.name)}": f"{fmt_number(getattr(spacing, f.name))}rem"
            for f in dataclasses.fields(spacing)
        }

    def compile_border_radius(self, theme: Theme) -> CompiledProperties:
        radius = theme.border_radius
        properties = {}
        for f in dataclasses.fields(radius):
            unit = "px" if f.name in ("none", "full") else "rem"
            properties[f"border-radius-{token(f.name)}"] = f"{fmt_number(getattr(radius, f.name))}{unit}"
        return properties

    def compile_shadows(self, theme: Theme) -> CompiledProperties:
        shadows = theme.shadows
        return {
            f"shadow-{token(f.name)}": getattr(shadows, f.name)
            for f in dataclasses.fields(shadows)
        }

    def compile_transitions(self, theme: Theme) -> CompiledProperties:
        transitions = theme.transitions
        properties = {}
        for f in dataclasses.fields(transitions):
            value = getattr(transitions, f.name)
            if f.name.startswith("duration"):
                properties[f"transition-{token(f.name)}"] = f"{fmt_number(value)}ms"
            else:
                properties[f"transition-{token(f.name)}"] = value
        return properties

    def compile_z_index(self, theme: Theme) -> CompiledProperties:
        z_index = theme.z_index
        return {
            f"z-index-{token(f.name)}": fmt_number(getattr(z_index, f.name))
            for f in dataclasses.fields(z_index)
        }

    def compile_breakpoints(self, theme: Theme) -> CompiledProperties:
        breakpoints = theme.breakpoints
        return {
            f"breakpoint-{token(f.name)}": getattr(breakpoints, f.name)
            for f in dataclasses.fields(breakpoints)
        }

    # ========== ADVANCED TYPOGRAPHY BLOCK ==========

    def compile_advanced_typography(self, advanced: AdvancedTypography) -> CompiledProperties:
        properties: CompiledProperties = {}

        for role_name in FontRoleName:
            properties[f"font-role-{role_name.value}"] = advanced.role(role_name).font_stack()

        elements = advanced.elements
        for f in dataclasses.fields(elements):
            element = getattr(elements, f.name)
            prefix = f"typography-{token(f.name)}"
            properties[f"{prefix}-size"] = f"{fmt_number(element.size)}rem"
            properties[f"{prefix}-line-height"] = fmt_number(element.line_height)
            properties[f"{prefix}-letter-spacing"] = f"{fmt_number(element.letter_spacing)}em"
            properties[f"{prefix}-weight"] = fmt_number(element.weight)

        responsive = advanced.responsive
        for f in dataclasses.fields(responsive):
            properties[f"typography-scale-{token(f.name)}"] = fmt_number(getattr(responsive, f.name))

        properties["typography-min-body-size"] = f"{fmt_number(advanced.accessibility.min_body_size)}px"
        return properties


_default_compiler = PropertyCompiler()


@timed("Compile theme properties", threshold_ms=5.0)
def compile_properties(theme: Theme) -> CompiledProperties:
    """Compile a theme with the shared default compiler."""
    return _default_compiler.compile(theme)
