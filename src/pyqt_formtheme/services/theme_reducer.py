"""
Engine state and the reducer that transitions it.

State changes are expressed as tagged actions (one frozen dataclass per
ActionType) and applied by ThemeReducer, a pure function of
``(state, action) -> state``. The reducer never validates, compiles or
schedules anything; ConfigurationStore does that before dispatching and
reacts to the returned state afterwards.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Mapping, Optional, Union

from pyqt_formtheme.services.enum_dispatch_service import EnumDispatchService
from pyqt_formtheme.theming.defaults import create_default_theme
from pyqt_formtheme.theming.models import FontLoadingStatus, Theme

logger = logging.getLogger(__name__)


class ActionType(Enum):
    SET_THEME = "set_theme"
    UPDATE_THEME = "update_theme"
    UPDATE_TYPOGRAPHY = "update_typography"
    SET_FONT_LOADING_STATE = "set_font_loading_state"
    SET_PREVIEW_MODE = "set_preview_mode"
    SET_PREVIEW_THEME = "set_preview_theme"
    SET_LOADING = "set_loading"
    SET_TYPOGRAPHY_LOADING = "set_typography_loading"
    SET_ERROR = "set_error"
    RESET_THEME = "reset_theme"
    SAVE_THEME = "save_theme"


# ========== ACTIONS ==========

@dataclass(frozen=True)
class SetTheme:
    """Wholesale replace. ``mark_dirty`` is False for loads from storage."""
    theme: Theme
    mark_dirty: bool = True
    type: ClassVar[ActionType] = ActionType.SET_THEME


@dataclass(frozen=True)
class UpdateTheme:
    """Commit an already merged and validated candidate."""
    theme: Theme
    type: ClassVar[ActionType] = ActionType.UPDATE_THEME


@dataclass(frozen=True)
class UpdateTypography:
    theme: Theme
    type: ClassVar[ActionType] = ActionType.UPDATE_TYPOGRAPHY


@dataclass(frozen=True)
class SetFontLoadingState:
    family: str
    status: FontLoadingStatus
    type: ClassVar[ActionType] = ActionType.SET_FONT_LOADING_STATE


@dataclass(frozen=True)
class SetPreviewMode:
    enabled: bool
    type: ClassVar[ActionType] = ActionType.SET_PREVIEW_MODE


@dataclass(frozen=True)
class SetPreviewTheme:
    theme: Optional[Theme]
    type: ClassVar[ActionType] = ActionType.SET_PREVIEW_THEME


@dataclass(frozen=True)
class SetLoading:
    loading: bool
    type: ClassVar[ActionType] = ActionType.SET_LOADING


@dataclass(frozen=True)
class SetTypographyLoading:
    loading: bool
    type: ClassVar[ActionType] = ActionType.SET_TYPOGRAPHY_LOADING


@dataclass(frozen=True)
class SetError:
    error: Optional[str]
    type: ClassVar[ActionType] = ActionType.SET_ERROR


@dataclass(frozen=True)
class ResetTheme:
    theme: Theme
    type: ClassVar[ActionType] = ActionType.RESET_THEME


@dataclass(frozen=True)
class SaveTheme:
    type: ClassVar[ActionType] = ActionType.SAVE_THEME


Action = Union[
    SetTheme, UpdateTheme, UpdateTypography, SetFontLoadingState, SetPreviewMode,
    SetPreviewTheme, SetLoading, SetTypographyLoading, SetError, ResetTheme, SaveTheme,
]


# ========== STATE ==========

@dataclass(frozen=True)
class EngineState:
    """
    Immutable snapshot of the engine.

    ``current_theme`` is never None. ``font_loading_state`` maps a font family
    to its loading status and is only ever replaced, never mutated in place.
    """

    current_theme: Theme
    preview_theme: Optional[Theme] = None
    preview_mode: bool = False
    is_loading: bool = False
    typography_loading: bool = False
    error: Optional[str] = None
    has_unsaved_changes: bool = False
    font_loading_state: Mapping[str, FontLoadingStatus] = field(default_factory=dict)

    @property
    def active_theme(self) -> Theme:
        """Theme that compilation and application currently follow."""
        if self.preview_mode and self.preview_theme is not None:
            return self.preview_theme
        return self.current_theme

    def font_status(self, family: str) -> Optional[FontLoadingStatus]:
        return self.font_loading_state.get(family)


def initial_state(theme: Optional[Theme] = None) -> EngineState:
    return EngineState(current_theme=theme if theme is not None else create_default_theme())


def _any_loading(font_state: Mapping[str, FontLoadingStatus]) -> bool:
    return any(status is FontLoadingStatus.LOADING for status in font_state.values())


# ========== REDUCER ==========

class ThemeReducer(EnumDispatchService[ActionType]):
    """Pure, exhaustive reducer over the tagged action set."""

    def __init__(self):
        super().__init__()
        self._register_handlers(ActionType, {
            ActionType.SET_THEME: self._set_theme,
            ActionType.UPDATE_THEME: self._update_theme,
            ActionType.UPDATE_TYPOGRAPHY: self._update_theme,
            ActionType.SET_FONT_LOADING_STATE: self._set_font_loading_state,
            ActionType.SET_PREVIEW_MODE: self._set_preview_mode,
            ActionType.SET_PREVIEW_THEME: self._set_preview_theme,
            ActionType.SET_LOADING: self._set_loading,
            ActionType.SET_TYPOGRAPHY_LOADING: self._set_typography_loading,
            ActionType.SET_ERROR: self._set_error,
            ActionType.RESET_THEME: self._reset_theme,
            ActionType.SAVE_THEME: self._save_theme,
        })

    def _determine_strategy(self, state: EngineState, action: Action) -> ActionType:
        return action.type

    def reduce(self, state: EngineState, action: Action) -> EngineState:
        return self.dispatch(state, action)

    # ========== HANDLERS ==========

    def _set_theme(self, state: EngineState, action: SetTheme) -> EngineState:
        return replace(state, current_theme=action.theme, error=None,
                       has_unsaved_changes=action.mark_dirty)

    def _update_theme(self, state: EngineState, action: Union[UpdateTheme, UpdateTypography]) -> EngineState:
        return replace(state, current_theme=action.theme, error=None, has_unsaved_changes=True)

    def _set_font_loading_state(self, state: EngineState, action: SetFontLoadingState) -> EngineState:
        font_state = dict(state.font_loading_state)
        font_state[action.family] = action.status
        return replace(state, font_loading_state=font_state,
                       typography_loading=_any_loading(font_state))

    def _set_preview_mode(self, state: EngineState, action: SetPreviewMode) -> EngineState:
        if action.enabled:
            return replace(state, preview_mode=True)
        return replace(state, preview_mode=False, preview_theme=None)

    def _set_preview_theme(self, state: EngineState, action: SetPreviewTheme) -> EngineState:
        return replace(state, preview_theme=action.theme)

    def _set_loading(self, state: EngineState, action: SetLoading) -> EngineState:
        return replace(state, is_loading=action.loading)

    def _set_typography_loading(self, state: EngineState, action: SetTypographyLoading) -> EngineState:
        return replace(state, typography_loading=action.loading)

    def _set_error(self, state: EngineState, action: SetError) -> EngineState:
        return replace(state, error=action.error)

    def _reset_theme(self, state: EngineState, action: ResetTheme) -> EngineState:
        return EngineState(current_theme=action.theme, is_loading=state.is_loading)

    def _save_theme(self, state: EngineState, action: SaveTheme) -> EngineState:
        return replace(state, has_unsaved_changes=False)
