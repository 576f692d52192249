"""
QStyleSheet and CSS text generation from compiled properties.

Turns a flat compiled property mapping into either a Qt stylesheet for form
widgets or a ``:root`` block of CSS custom properties. Qt stylesheets do not
understand rem/em units or fractional alpha, so values are converted to px
and integer-alpha colors on the way out.
"""

import logging
import re
from typing import Mapping, Optional

from pyqt_formtheme.theming.colors import parse_color

logger = logging.getLogger(__name__)

REM_PX = 16.0
CSS_VARIABLE_PREFIX = "form"

_LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)(px|rem|em)?$")


def to_qss_color(value: str) -> str:
    """Convert a CSS color string to a QSS-compatible color (hex, or rgba with 0-255 alpha)."""
    rgba = parse_color(value)
    if rgba is None:
        logger.debug(f"Passing unparseable color through unchanged: {value}")
        return value
    r, g, b, a = rgba
    if a == 255:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"rgba({r}, {g}, {b}, {a})"


def to_px(value: str, default: str = "0px") -> str:
    """Convert a rem/em/px length string to whole px."""
    match = _LENGTH_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        return default
    number = float(match.group(1))
    if match.group(2) in ("rem", "em"):
        number *= REM_PX
    return f"{round(number)}px"


def primary_family(font_stack: str) -> str:
    """First family of a CSS font-family list, unquoted."""
    first = font_stack.split(",")[0].strip()
    return first.strip("'\"")


def generate_css_text(properties: Mapping[str, str], prefix: str = CSS_VARIABLE_PREFIX) -> str:
    """Render properties as a ``:root`` block of CSS custom properties."""
    lines = [f"  --{prefix}-{name}: {value};" for name, value in properties.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"


class StyleSheetGenerator:
    """
    Generates QStyleSheet strings from compiled properties.

    Element typography (``typography-question-label-size`` ...) is used when
    the properties carry the advanced block; otherwise the basic font sizes
    stand in.
    """

    def __init__(self, properties: Mapping[str, str]):
        self.properties = dict(properties)

    def update_properties(self, properties: Mapping[str, str]):
        self.properties = dict(properties)

    def _color(self, name: str) -> str:
        return to_qss_color(self.properties.get(f"color-{name}", "transparent"))

    def _element_font(self, element: str, fallback_size: str, role: str = "primary") -> str:
        p = self.properties
        size = p.get(f"typography-{element}-size", p.get(fallback_size, "1rem"))
        weight = p.get(f"typography-{element}-weight", p.get("font-weight-normal", "400"))
        family = p.get(f"font-role-{role}", p.get("font-family", "sans-serif"))
        return (
            f"font-family: '{primary_family(family)}';\n"
            f"                font-size: {to_px(size, '16px')};\n"
            f"                font-weight: {weight};"
        )

    def generate_form_style(self) -> str:
        """
        Generate QStyleSheet for a form surface.

        Returns:
            str: QStyleSheet covering labels, inputs, buttons and status text
        """
        p = self.properties
        radius = to_px(p.get("border-radius-md", "0.375rem"))
        padding = to_px(p.get("spacing-sm", "0.5rem"))
        return f"""
            QWidget {{
                background-color: {self._color('background')};
                color: {self._color('text-primary')};
            }}
            QLabel {{
                {self._element_font('question-label', 'font-size-lg')}
                color: {self._color('text-primary')};
            }}
            QLabel[formRole="title"] {{
                {self._element_font('form-title', 'font-size-4xl', role='secondary')}
            }}
            QLabel[formRole="description"], QLabel[formRole="help"] {{
                {self._element_font('help-text', 'font-size-sm')}
                color: {self._color('text-secondary')};
            }}
            QLabel[formRole="error"] {{
                {self._element_font('error-text', 'font-size-sm')}
                color: {self._color('error')};
            }}
            QLabel[formRole="success"] {{
                {self._element_font('success-text', 'font-size-sm')}
                color: {self._color('success')};
            }}
            QGroupBox {{
                {self._element_font('section-title', 'font-size-2xl')}
                background-color: {self._color('surface')};
                border: 1px solid {self._color('border')};
                border-radius: {radius};
                margin-top: {padding};
            }}
            QLineEdit, QTextEdit, QPlainTextEdit, QSpinBox, QDoubleSpinBox, QComboBox {{
                {self._element_font('input-text', 'font-size-base')}
                background-color: {self._color('surface-elevated')};
                color: {self._color('text-primary')};
                border: 1px solid {self._color('border')};
                border-radius: {radius};
                padding: {padding};
            }}
            QLineEdit:hover, QTextEdit:hover, QPlainTextEdit:hover, QSpinBox:hover, QDoubleSpinBox:hover, QComboBox:hover {{
                border: 1px solid {self._color('border-hover')};
            }}
            QLineEdit:focus, QTextEdit:focus, QPlainTextEdit:focus, QSpinBox:focus, QDoubleSpinBox:focus, QComboBox:focus {{
                border: 1px solid {self._color('border-focus')};
            }}
            {self.generate_button_style()}
        """

    def generate_button_style(self) -> str:
        """
        Generate QStyleSheet for buttons with all states.

        Returns:
            str: Complete QStyleSheet for button styling
        """
        radius = to_px(self.properties.get("border-radius-md", "0.375rem"))
        return f"""
            QPushButton {{
                {self._element_font('button-text', 'font-size-base')}
                background-color: {self._color('primary')};
                color: {self._color('text-inverse')};
                border: none;
                border-radius: {radius};
                padding: {to_px(self.properties.get('spacing-sm', '0.5rem'))};
            }}
            QPushButton:hover {{
                background-color: {self._color('primary-hover')};
            }}
            QPushButton:pressed {{
                background-color: {self._color('primary-active')};
            }}
            QPushButton:disabled {{
                background-color: {self._color('primary-disabled')};
            }}
        """

    def generate_css_text(self, prefix: Optional[str] = None) -> str:
        return generate_css_text(self.properties, prefix or CSS_VARIABLE_PREFIX)
