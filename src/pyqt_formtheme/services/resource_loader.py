"""
Asynchronous loading of externally hosted fonts.

Each load runs the configured FontLoader on a background thread. Status
transitions are reported through ``font_state_changed``: LOADING right
away, then exactly one of LOADED or ERROR once the worker finishes. A
failing font is logged and reported; it never affects other loads.
"""

import logging
from typing import Iterable, List, Optional, Set
from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formtheme.core.background_task import BackgroundTaskPool
from pyqt_formtheme.protocols.font_loader import FontLoader, FontReference
from pyqt_formtheme.theming.exceptions import ResourceLoadError
from pyqt_formtheme.theming.models import FontLoadingStatus

logger = logging.getLogger(__name__)


class ResourceLoader(QObject):
    """
    Runs font loads off the main thread and reports their status.

    Signals:
        font_state_changed(str, object): family and its new FontLoadingStatus
    """

    font_state_changed = pyqtSignal(str, object)

    def __init__(self, loader: Optional[FontLoader] = None, parent=None):
        super().__init__(parent)
        self._loader = loader
        self._tasks = BackgroundTaskPool(parent=self)
        self._in_flight: Set[str] = set()

    @property
    def loader(self) -> Optional[FontLoader]:
        return self._loader

    def pending_count(self) -> int:
        """Number of loads that have not reported a terminal status yet."""
        return len(self._in_flight)

    def is_loading(self, family: str) -> bool:
        return family in self._in_flight

    def load_font(self, font: FontReference) -> bool:
        """
        Start loading one font.

        Returns False (and starts nothing) when the family is already in
        flight, since its pending result will cover this request too.
        """
        family = font.family
        if family in self._in_flight:
            logger.debug(f"Font '{family}' is already loading")
            return False

        self._in_flight.add(family)
        self.font_state_changed.emit(family, FontLoadingStatus.LOADING)

        if self._loader is None:
            self._on_failed(ResourceLoadError(family, "no font loader configured"))
            return True

        logger.debug(f"Loading font '{family}' from {font.source or '<default source>'}")
        self._tasks.run(
            target=self._load_one,
            args=(font,),
            on_success=self._on_loaded,
            on_error=self._on_failed,
        )
        return True

    def load_fonts(self, fonts: Iterable[FontReference]) -> List[str]:
        """Start loads for the distinct families in ``fonts``. Returns the families started."""
        started = []
        seen = set()
        for font in fonts:
            if font.family in seen:
                continue
            seen.add(font.family)
            if self.load_font(font):
                started.append(font.family)
        return started

    def _load_one(self, font: FontReference) -> str:
        # Worker thread. Errors always carry the requested family
        try:
            self._loader.load(font)
        except ResourceLoadError as e:
            if e.family == font.family:
                raise
            raise ResourceLoadError(font.family, str(e)) from e
        except Exception as e:
            raise ResourceLoadError(font.family, str(e)) from e
        return font.family

    def _on_loaded(self, family: str) -> None:
        self._in_flight.discard(family)
        logger.info(f"Font '{family}' loaded")
        self.font_state_changed.emit(family, FontLoadingStatus.LOADED)

    def _on_failed(self, error: Exception) -> None:
        family = getattr(error, "family", None)
        if family is None:
            logger.error(f"Font load failed without a family: {error}")
            return
        self._in_flight.discard(family)
        logger.warning(str(error))
        self.font_state_changed.emit(family, FontLoadingStatus.ERROR)

    def cleanup(self) -> None:
        """Wait for in-flight loads. Their results are still delivered by the event loop."""
        self._tasks.cleanup()
