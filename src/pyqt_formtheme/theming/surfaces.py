"""
Rendering surfaces for compiled properties.

A surface receives flat property mappings from the ApplicationManager.
Mappings passed to ``apply`` may be partial; surfaces merge them into what
they already hold. ``clear`` removes everything the surface applied.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Union
from PyQt6.QtWidgets import QApplication, QWidget

from pyqt_formtheme.theming.palette_manager import PaletteManager
from pyqt_formtheme.theming.style_generator import (
    CSS_VARIABLE_PREFIX,
    StyleSheetGenerator,
    generate_css_text,
)

logger = logging.getLogger(__name__)


class MemorySurface:
    """Keeps applied properties in memory and records every write."""

    def __init__(self):
        self.properties: Dict[str, str] = {}
        self.writes: List[Dict[str, str]] = []

    def apply(self, properties: Mapping[str, str]) -> None:
        self.properties.update(properties)
        self.writes.append(dict(properties))

    def clear(self) -> None:
        self.properties.clear()

    @property
    def write_count(self) -> int:
        return len(self.writes)


class CssTextSurface:
    """
    Maintains a ``:root { --form-... }`` block for a web rendering layer.

    ``on_change`` (if given) receives the full CSS text after every write.
    """

    def __init__(self, prefix: str = CSS_VARIABLE_PREFIX,
                 on_change: Optional[Callable[[str], None]] = None):
        self.prefix = prefix
        self._on_change = on_change
        self._properties: Dict[str, str] = {}

    @property
    def text(self) -> str:
        if not self._properties:
            return ""
        return generate_css_text(self._properties, self.prefix)

    def apply(self, properties: Mapping[str, str]) -> None:
        self._properties.update(properties)
        self._notify()

    def clear(self) -> None:
        self._properties.clear()
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.text)


class QtStyleSurface:
    """
    Projects properties onto a widget (or the whole application) as a
    QPalette plus a form stylesheet.
    """

    def __init__(self, target: Union[QApplication, QWidget, None] = None):
        self._target = target
        self._properties: Dict[str, str] = {}
        self._palette_manager = PaletteManager()
        self._style_generator = StyleSheetGenerator({})

    def _resolve_target(self):
        return self._target if self._target is not None else QApplication.instance()

    @property
    def style_sheet(self) -> str:
        return self._style_generator.generate_form_style() if self._properties else ""

    def apply(self, properties: Mapping[str, str]) -> None:
        self._properties.update(properties)
        self._palette_manager.update_properties(self._properties)
        self._style_generator.update_properties(self._properties)

        target = self._resolve_target()
        if target is None:
            logger.warning("No widget or QApplication to style, properties kept for the next apply")
            return

        self._palette_manager.apply_palette(target)
        target.setStyleSheet(self._style_generator.generate_form_style())

    def clear(self) -> None:
        self._properties.clear()
        target = self._resolve_target()
        if target is None:
            return
        self._palette_manager.restore_original_palette(target)
        target.setStyleSheet("")
