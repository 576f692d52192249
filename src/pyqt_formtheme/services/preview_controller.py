"""
Preview mode on top of a ConfigurationStore.

A previewed theme becomes the active theme (compiled and applied) without
touching the current theme, the unsaved-changes flag or auto-save. It can
then be committed through the normal set path or discarded.

    idle --enable--> previewing --commit--> idle (current = preview)
    previewing --disable--> idle (current unchanged)
"""

import copy
import logging
from typing import Optional, TYPE_CHECKING

from pyqt_formtheme.services.theme_reducer import SetPreviewMode, SetPreviewTheme
from pyqt_formtheme.theming.models import Theme
from pyqt_formtheme.theming.validation import ValidationError, ValidationResult, validate_theme

if TYPE_CHECKING:
    from pyqt_formtheme.services.configuration_store import ConfigurationStore

logger = logging.getLogger(__name__)


class PreviewController:
    """Stage-without-commit mode for a ConfigurationStore."""

    def __init__(self, store: "ConfigurationStore"):
        self._store = store

    @property
    def is_previewing(self) -> bool:
        return self._store.state.preview_mode

    @property
    def preview_theme(self) -> Optional[Theme]:
        return self._store.state.preview_theme

    def enable_preview(self, candidate: Theme) -> ValidationResult:
        """Validate and stage ``candidate`` as the active theme."""
        store = self._store
        if not store.config.enable_preview:
            message = "Preview mode is disabled"
            store._report_error(message)
            return ValidationResult([ValidationError("preview", message, None)])

        candidate = copy.deepcopy(candidate)
        result = validate_theme(candidate)
        if not result.is_valid:
            store._reject(result)
            return result

        store._cancel_autosave()
        store._dispatch(SetPreviewTheme(candidate))
        store._dispatch(SetPreviewMode(True))
        store._preload_fonts(candidate)
        logger.info(f"Previewing theme '{candidate.id}'")
        return result

    def disable_preview(self) -> bool:
        """Discard the staged theme. Returns False if preview was not active."""
        if not self.is_previewing:
            return False
        self._store._dispatch(SetPreviewMode(False))
        self._store._schedule_autosave()
        logger.info("Preview discarded")
        return True

    def commit_preview(self) -> bool:
        """Promote the staged theme to the current theme. Returns False if nothing is staged."""
        candidate = self.preview_theme
        if not self.is_previewing or candidate is None:
            return False

        # Replace current while the preview is still active so the surface
        # sees one switch instead of two
        if not self._store.set_theme(candidate):
            return False
        self._store._dispatch(SetPreviewMode(False))
        self._store._schedule_autosave()
        logger.info(f"Committed preview of theme '{candidate.id}'")
        return True
