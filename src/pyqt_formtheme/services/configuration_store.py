"""
Configuration store: the theme engine's state machine.

Validates every mutation before it is committed through the reducer, keeps
the compiled properties of the active theme on the surface, starts font
loads for themes that ask for preloading and auto-saves after a quiet
period. All state changes happen on the Qt main thread; font completions
come back as queued signals and are dispatched like any other action.

Usage:
    store = ConfigurationStore(store=QSettingsStore(), surface=QtStyleSurface(window))
    store.restore()

    result = store.update({"colors": {"primary": "#FF0000"}})
    if not result.is_valid:
        show_errors(result.errors)

    store.close()  # flush pending writes and auto-save
"""

import copy
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formtheme.core.debounce_timer import DebounceTimer
from pyqt_formtheme.io.exceptions import PersistenceError
from pyqt_formtheme.io.persistence import PersistenceAdapter
from pyqt_formtheme.protocols.font_loader import FontLoader, FontReference
from pyqt_formtheme.protocols.property_surface import PropertySurface
from pyqt_formtheme.protocols.storage import KeyValueStore
from pyqt_formtheme.protocols.theme_config import ThemeEngineConfig, get_theme_config
from pyqt_formtheme.services.application_manager import ApplicationManager
from pyqt_formtheme.services.change_tracker import ThemeChangeTracker
from pyqt_formtheme.services.preview_controller import PreviewController
from pyqt_formtheme.services.resource_loader import ResourceLoader
from pyqt_formtheme.services.theme_reducer import (
    Action,
    EngineState,
    ResetTheme,
    SaveTheme,
    SetError,
    SetFontLoadingState,
    SetLoading,
    SetTheme,
    ThemeReducer,
    UpdateTheme,
    UpdateTypography,
    initial_state,
)
from pyqt_formtheme.theming.defaults import create_default_theme
from pyqt_formtheme.theming.exceptions import ConfigurationError
from pyqt_formtheme.theming.models import FontLoadingStatus, Theme, utc_now
from pyqt_formtheme.theming.property_compiler import CompiledProperties, compile_properties
from pyqt_formtheme.theming.serialization import merge_changes
from pyqt_formtheme.theming.validation import ValidationResult, audit_accessibility, validate_theme

logger = logging.getLogger(__name__)


class ConfigurationStore(QObject):
    """
    Central theme state holder.

    Signals:
        state_changed(EngineState): after every committed action
        theme_changed(Theme): when the active theme changes
        error_occurred(str): when a mutation or operation is rejected

    Args:
        store: Durable key-value store for persistence (in-memory if omitted)
        font_loader: Loader used for externally hosted fonts
        surface: Rendering surface for compiled properties (in-memory if omitted)
        config: Engine configuration (process-wide default if omitted)
        initial_theme: Starting theme (built-in default if omitted)
        on_error: Optional callback receiving every surfaced error message
    """

    state_changed = pyqtSignal(object)
    theme_changed = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(self,
                 store: Optional[KeyValueStore] = None,
                 font_loader: Optional[FontLoader] = None,
                 surface: Optional[PropertySurface] = None,
                 config: Optional[ThemeEngineConfig] = None,
                 initial_theme: Optional[Theme] = None,
                 on_error: Optional[Callable[[str], None]] = None,
                 parent=None):
        super().__init__(parent)
        self._config = config or get_theme_config()
        self._reducer = ThemeReducer()
        self._state = initial_state(initial_theme)
        self._compiled: CompiledProperties = {}
        self._closed = False
        self.on_error = on_error

        self.persistence = PersistenceAdapter(store, self._config)
        self.application = ApplicationManager(surface, self._config, parent=self)
        self.resources = ResourceLoader(font_loader, parent=self)
        self.resources.font_state_changed.connect(self._on_font_state_changed)
        self.change_tracker = ThemeChangeTracker(self._config.frame_budget_ms)
        self.preview = PreviewController(self)
        self._autosave = DebounceTimer(self._config.autosave_delay_ms, self._autosave_now)

        self._apply_active(immediate=True)
        self._preload_fonts(self._state.current_theme)

    # ========== READ ACCESS ==========

    @property
    def config(self) -> ThemeEngineConfig:
        return self._config

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def current_theme(self) -> Theme:
        return self._state.current_theme

    @property
    def active_theme(self) -> Theme:
        return self._state.active_theme

    @property
    def compiled_properties(self) -> CompiledProperties:
        """Compiled properties of the active theme (may be ahead of the surface until flushed)."""
        return dict(self._compiled)

    def is_autosave_pending(self) -> bool:
        return self._autosave.is_pending()

    # ========== MUTATIONS ==========

    def update(self, changes: Mapping[str, Any]) -> ValidationResult:
        """
        Merge ``changes`` into the current theme.

        Nested mappings merge into the addressed group field by field. The
        merged candidate is validated as a whole; on failure nothing but
        ``state.error`` changes.
        """
        current = self._state.current_theme
        candidate, merge_errors = merge_changes(current, changes)
        result = ValidationResult(list(merge_errors))
        result.extend(validate_theme(candidate).errors)
        if not result.is_valid:
            self._reject(result)
            return result

        candidate = replace(candidate, updated_at=utc_now())
        self._dispatch(UpdateTheme(candidate), immediate=False)
        self._schedule_autosave()
        self._preload_fonts(candidate)
        return result

    def set_theme(self, theme: Theme) -> bool:
        """Replace the current theme wholesale. Returns False if ``theme`` is invalid."""
        # The store owns its themes
        theme = copy.deepcopy(theme)
        result = validate_theme(theme)
        if not result.is_valid:
            self._reject(result)
            return False

        self._dispatch(SetTheme(theme))
        self._schedule_autosave()
        self._preload_fonts(theme)
        logger.info(f"Theme set to '{theme.id}'")
        return True

    def update_typography(self, changes: Mapping[str, Any]) -> bool:
        """
        Merge ``changes`` into the current theme's advanced typography.

        Fails closed when the theme has no advanced typography. A changed
        primary font role re-derives the legacy ``typography.font_family``.
        """
        current = self._state.current_theme
        if current.advanced_typography is None:
            error = ConfigurationError(
                f"Theme '{current.id}' has no advanced typography to update")
            self._report_error(str(error))
            return False

        advanced, merge_errors = merge_changes(current.advanced_typography, changes, "advanced_typography")
        typography = current.typography
        if advanced.primary != current.advanced_typography.primary:
            typography = replace(typography, font_family=advanced.primary.font_stack())

        candidate = replace(current, advanced_typography=advanced, typography=typography)
        result = ValidationResult(list(merge_errors))
        result.extend(validate_theme(candidate).errors)
        if not result.is_valid:
            self._reject(result)
            return False

        candidate = replace(candidate, updated_at=utc_now())
        self._dispatch(UpdateTypography(candidate), immediate=False)
        self._schedule_autosave()
        self._preload_fonts(candidate)
        return True

    def reset(self) -> None:
        """Revert to the built-in default theme and forget the persisted current slot."""
        self._cancel_autosave()
        theme = create_default_theme()
        self._dispatch(ResetTheme(theme))
        if self._config.enable_persistence:
            self.persistence.remove()
        self._preload_fonts(theme)
        logger.info("Theme reset to default")

    def clear_error(self) -> None:
        if self._state.error is not None:
            self._dispatch(SetError(None))

    # ========== PERSISTENCE ==========

    def save(self) -> bool:
        """Persist the current theme now. Returns False (and reports) on failure."""
        if not self._config.enable_persistence:
            logger.debug("Persistence disabled, not saving")
            return False

        self._cancel_autosave()
        self._dispatch(SetLoading(True))
        try:
            self.persistence.save(self._state.current_theme)
        except PersistenceError as e:
            logger.error(f"Saving theme failed: {e}", exc_info=True)
            self._report_error(str(e))
            return False
        finally:
            self._dispatch(SetLoading(False))

        self._dispatch(SaveTheme())
        logger.info(f"Saved theme '{self._state.current_theme.id}'")
        return True

    def restore(self) -> bool:
        """Load the persisted current theme, if any. Returns True if one was adopted."""
        if not self._config.enable_persistence:
            return False

        self._dispatch(SetLoading(True))
        try:
            theme = self.persistence.load()
        finally:
            self._dispatch(SetLoading(False))
        if theme is None:
            return False
        return self._adopt_stored(theme, "persisted theme")

    def load_theme(self, theme_id: str) -> bool:
        """Make the named snapshot the current theme (without marking it dirty)."""
        theme = self.persistence.load_snapshot(theme_id)
        if theme is None:
            self._report_error(f"Snapshot '{theme_id}' not found or unreadable")
            return False
        return self._adopt_stored(theme, f"snapshot '{theme_id}'")

    def _adopt_stored(self, theme: Theme, origin: str) -> bool:
        result = validate_theme(theme)
        if not result.is_valid:
            logger.warning(f"Ignoring invalid {origin}: {result.summary()}")
            self._reject(result)
            return False
        self._dispatch(SetTheme(theme, mark_dirty=False))
        self._preload_fonts(theme)
        logger.info(f"Loaded {origin} ('{theme.id}')")
        return True

    def save_snapshot(self, theme: Optional[Theme] = None) -> Optional[str]:
        """Save ``theme`` (the current theme by default) as a named snapshot. Returns its key."""
        theme = theme or self._state.current_theme
        try:
            return self.persistence.save_snapshot(theme)
        except PersistenceError as e:
            logger.error(f"Saving snapshot failed: {e}", exc_info=True)
            self._report_error(str(e))
            return None

    def delete_snapshot(self, theme_id: str) -> bool:
        return self.persistence.delete_snapshot(theme_id)

    def list_snapshots(self) -> List[str]:
        return self.persistence.list_snapshots()

    def export_theme(self, theme: Optional[Theme] = None) -> str:
        return self.persistence.export_theme(theme or self._state.current_theme)

    def import_theme(self, text: str) -> Tuple[Optional[Theme], ValidationResult]:
        """Parse, validate and adopt exported theme text as the current theme."""
        theme, result = self.persistence.import_theme(text)
        if theme is None:
            self._reject(result)
            return None, result
        if not self.set_theme(theme):
            return None, result
        return self._state.current_theme, result

    # ========== QUERIES ==========

    def validate(self, theme: Optional[Theme] = None) -> ValidationResult:
        return validate_theme(theme or self._state.current_theme)

    def audit_accessibility(self, theme: Optional[Theme] = None) -> ValidationResult:
        return audit_accessibility(theme or self._state.active_theme)

    def compile(self, theme: Optional[Theme] = None) -> CompiledProperties:
        return compile_properties(theme or self._state.active_theme)

    # ========== FONTS ==========

    def retry_font(self, family: str) -> bool:
        """Request a new load for ``family``, whatever its current status."""
        advanced = self._state.active_theme.advanced_typography
        font = FontReference(family)
        if advanced is not None:
            for role in (advanced.primary, advanced.secondary, advanced.mono):
                if role.family == family:
                    font = FontReference.from_role(role)
                    break
        return self.resources.load_font(font)

    def _preload_fonts(self, theme: Theme) -> None:
        advanced = theme.advanced_typography
        if advanced is None or not advanced.performance.preload_fonts:
            return
        tracked = self._state.font_loading_state
        fonts = [FontReference.from_role(role) for role in advanced.external_roles()
                 if role.family not in tracked]
        if fonts:
            self.resources.load_fonts(fonts)

    def _on_font_state_changed(self, family: str, status: FontLoadingStatus) -> None:
        self._dispatch(SetFontLoadingState(family, status))

    # ========== INTERNALS ==========

    def _dispatch(self, action: Action, immediate: bool = True) -> EngineState:
        previous = self._state
        self._state = self._reducer.reduce(previous, action)

        if self._state.active_theme is not previous.active_theme:
            self._apply_active(immediate)
            theme = self._state.active_theme
            self.change_tracker.record(theme.id)
            self.theme_changed.emit(theme)

        self.state_changed.emit(self._state)
        return self._state

    def _apply_active(self, immediate: bool) -> None:
        properties = compile_properties(self._state.active_theme)
        check = self.application.validate_properties(properties)
        if not check.is_valid:
            logger.warning(f"Compiled properties contain malformed values: {check.summary()}")

        previous = self._compiled
        self._compiled = properties
        if immediate or not self.application.has_properties() or set(previous) - set(properties):
            self.application.apply_immediate(properties)
            return

        changed: Dict[str, str] = {k: v for k, v in properties.items() if previous.get(k) != v}
        if changed:
            self.application.apply_incremental(changed)

    def _reject(self, result: ValidationResult) -> None:
        self._report_error(f"Validation failed: {result.summary()}")

    def _report_error(self, message: str) -> None:
        logger.warning(message)
        self._dispatch(SetError(message))
        self.error_occurred.emit(message)
        if self.on_error is not None:
            self.on_error(message)

    def _schedule_autosave(self) -> None:
        state = self._state
        if self._config.enable_persistence and state.has_unsaved_changes and not state.preview_mode:
            self._autosave.trigger()

    def _cancel_autosave(self) -> None:
        self._autosave.cancel()

    def _autosave_now(self) -> None:
        state = self._state
        if state.has_unsaved_changes and not state.preview_mode:
            logger.debug("Auto-saving theme")
            self.save()

    def close(self) -> None:
        """Flush pending property writes, perform a pending auto-save and wait for font loads."""
        if self._closed:
            return
        self.application.flush()
        self._autosave.flush()
        self.resources.cleanup()
        self._closed = True
        logger.debug("Configuration store closed")
