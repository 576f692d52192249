"""
QPalette integration for compiled properties.

Maps the color entries of a compiled property set onto Qt palette roles so
native widgets pick up theme colors even where no stylesheet applies.
"""

import logging
from typing import Mapping, Optional, Union
from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import QApplication, QWidget

from pyqt_formtheme.theming.colors import parse_color

logger = logging.getLogger(__name__)

# (palette role, color property) for the Active/Inactive groups
_ROLE_MAP = [
    (QPalette.ColorRole.Window, "color-background"),
    (QPalette.ColorRole.WindowText, "color-text-primary"),
    (QPalette.ColorRole.Base, "color-surface-elevated"),
    (QPalette.ColorRole.AlternateBase, "color-surface"),
    (QPalette.ColorRole.Text, "color-text-primary"),
    (QPalette.ColorRole.PlaceholderText, "color-text-muted"),
    (QPalette.ColorRole.Button, "color-primary"),
    (QPalette.ColorRole.ButtonText, "color-text-inverse"),
    (QPalette.ColorRole.Highlight, "color-primary"),
    (QPalette.ColorRole.HighlightedText, "color-text-inverse"),
    (QPalette.ColorRole.ToolTipBase, "color-surface-elevated"),
    (QPalette.ColorRole.ToolTipText, "color-text-primary"),
    (QPalette.ColorRole.Link, "color-primary"),
    (QPalette.ColorRole.Mid, "color-border"),
    (QPalette.ColorRole.Dark, "color-border-hover"),
    (QPalette.ColorRole.Light, "color-surface"),
]

_DISABLED_ROLE_MAP = [
    (QPalette.ColorRole.WindowText, "color-text-muted"),
    (QPalette.ColorRole.Text, "color-text-muted"),
    (QPalette.ColorRole.Button, "color-primary-disabled"),
]


def to_qcolor(value: str) -> Optional[QColor]:
    """QColor for a CSS color string, or None if the syntax is not recognized."""
    rgba = parse_color(value)
    if rgba is None:
        return None
    return QColor(*rgba)


class PaletteManager:
    """
    Builds and applies QPalettes from compiled properties.

    Remembers the palette it replaced on the application so it can be
    restored when the surface is cleared.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        self.properties = dict(properties or {})
        self._original_palette = None

    def update_properties(self, properties: Mapping[str, str]):
        self.properties = dict(properties)

    def create_palette(self, base: Optional[QPalette] = None) -> QPalette:
        """
        Create a QPalette from the current properties.

        Roles whose property is missing or unparseable keep the value from
        ``base`` (a default palette when omitted).
        """
        palette = QPalette(base) if base is not None else QPalette()

        for role, name in _ROLE_MAP:
            color = self._lookup(name)
            if color is not None:
                palette.setColor(role, color)

        for role, name in _DISABLED_ROLE_MAP:
            color = self._lookup(name)
            if color is not None:
                palette.setColor(QPalette.ColorGroup.Disabled, role, color)

        return palette

    def _lookup(self, name: str) -> Optional[QColor]:
        value = self.properties.get(name)
        if value is None:
            return None
        color = to_qcolor(value)
        if color is None:
            logger.warning(f"Ignoring unparseable palette color {name}={value}")
        return color

    def apply_palette(self, target: Union[QApplication, QWidget, None] = None) -> bool:
        """
        Apply the palette to a widget or the application.

        Args:
            target: Widget or QApplication (uses QApplication.instance() if None)

        Returns:
            True if a palette was applied
        """
        if target is None:
            target = QApplication.instance()

        if target is None:
            logger.warning("No QApplication instance found, cannot apply palette")
            return False

        # Store original palette for restoration
        if self._original_palette is None:
            self._original_palette = QPalette(target.palette())

        target.setPalette(self.create_palette(self._original_palette))
        logger.debug("Applied compiled palette")
        return True

    def restore_original_palette(self, target: Union[QApplication, QWidget, None] = None):
        """Restore the palette that was in place before the first apply."""
        if target is None:
            target = QApplication.instance()

        if target is None or self._original_palette is None:
            logger.debug("No original palette to restore")
            return

        target.setPalette(self._original_palette)
        self._original_palette = None
        logger.debug("Restored original palette")

    def get_palette_info(self) -> dict:
        """Hex names of the main palette roles, for diagnostics."""
        palette = self.create_palette()
        return {
            "window": palette.color(QPalette.ColorRole.Window).name(),
            "window_text": palette.color(QPalette.ColorRole.WindowText).name(),
            "base": palette.color(QPalette.ColorRole.Base).name(),
            "text": palette.color(QPalette.ColorRole.Text).name(),
            "button": palette.color(QPalette.ColorRole.Button).name(),
            "button_text": palette.color(QPalette.ColorRole.ButtonText).name(),
            "highlight": palette.color(QPalette.ColorRole.Highlight).name(),
        }
