"""
Color syntax helpers.

Recognizes the color notations accepted in theme color slots and converts
them to RGB(A) tuples for contrast calculations and QColor construction.
"""

import colorsys
import re
from typing import Optional, Tuple

_NUMBER = r"\d*\.?\d+"
_ALPHA = rf"(?:[,/]\s*({_NUMBER}%?)\s*)?"

HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{4}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
RGB_COLOR_RE = re.compile(
    rf"^rgba?\(\s*(\d{{1,3}})\s*[,\s]\s*(\d{{1,3}})\s*[,\s]\s*(\d{{1,3}})\s*{_ALPHA}\)$"
)
HSL_COLOR_RE = re.compile(
    rf"^hsla?\(\s*({_NUMBER})(?:deg)?\s*[,\s]\s*({_NUMBER})%\s*[,\s]\s*({_NUMBER})%\s*{_ALPHA}\)$"
)
KEYWORD_COLORS = {
    "transparent": (0, 0, 0, 0),
    "currentcolor": None,
}

RGBA = Tuple[int, int, int, int]


def is_valid_color(value) -> bool:
    """Return True if ``value`` is a color string in a recognized syntax."""
    if not isinstance(value, str):
        return False
    value = value.strip()
    if value.lower() in KEYWORD_COLORS:
        return True
    return parse_color(value) is not None


def parse_color(value: str) -> Optional[RGBA]:
    """
    Parse a color string into an (r, g, b, a) tuple with 0-255 channels.

    Returns None for unrecognized syntax and for keywords with no fixed
    value (``currentColor``).
    """
    if not isinstance(value, str):
        return None
    value = value.strip()

    keyword = KEYWORD_COLORS.get(value.lower(), False)
    if keyword is not False:
        return keyword

    if HEX_COLOR_RE.match(value):
        return _parse_hex(value[1:])

    match = RGB_COLOR_RE.match(value)
    if match:
        r, g, b = (int(match.group(i)) for i in range(1, 4))
        if max(r, g, b) > 255:
            return None
        return (r, g, b, _parse_alpha(match.group(4)))

    match = HSL_COLOR_RE.match(value)
    if match:
        h = float(match.group(1)) % 360 / 360.0
        s = float(match.group(2)) / 100.0
        lightness = float(match.group(3)) / 100.0
        if s > 1 or lightness > 1:
            return None
        r, g, b = colorsys.hls_to_rgb(h, lightness, s)
        return (round(r * 255), round(g * 255), round(b * 255), _parse_alpha(match.group(4)))

    return None


def _parse_hex(digits: str) -> RGBA:
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (r, g, b, a)


def _parse_alpha(token: Optional[str]) -> int:
    if token is None:
        return 255
    if token.endswith("%"):
        fraction = float(token[:-1]) / 100.0
    else:
        fraction = float(token)
    return max(0, min(255, round(fraction * 255)))


def to_rgb01(rgba: RGBA) -> Tuple[float, float, float]:
    """Drop alpha and scale channels to 0..1 (wcag-contrast-ratio input format)."""
    r, g, b, _ = rgba
    return (r / 255.0, g / 255.0, b / 255.0)
