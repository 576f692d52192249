"""Tests for the reducer, application manager, resource loader and configuration store."""

import dataclasses

import pytest
from PyQt6.QtTest import QTest

from pyqt_formtheme.io import MemoryStore
from pyqt_formtheme.protocols import FontReference, ThemeEngineConfig
from pyqt_formtheme.services import (
    ActionType,
    ApplicationManager,
    ConfigurationStore,
    EnumDispatchService,
    ResourceLoader,
    ThemeChangeTracker,
    ThemeReducer,
    initial_state,
)
from pyqt_formtheme.services.theme_reducer import (
    ResetTheme,
    SaveTheme,
    SetError,
    SetFontLoadingState,
    SetPreviewMode,
    SetPreviewTheme,
    UpdateTheme,
)
from pyqt_formtheme.theming import MemorySurface, create_dark_theme, create_default_theme, theme_to_json
from pyqt_formtheme.theming.exceptions import ResourceLoadError
from pyqt_formtheme.theming.models import FontLoadingStatus, FontRole, PerformanceSettings


class CountingStore(MemoryStore):
    """MemoryStore that counts writes per key."""

    def __init__(self):
        super().__init__()
        self.writes = {}

    def set(self, key, value):
        self.writes[key] = self.writes.get(key, 0) + 1
        super().set(key, value)


def external_fonts_theme(preload=True):
    theme = create_default_theme()
    advanced = dataclasses.replace(
        theme.advanced_typography,
        primary=FontRole("Inter", ["system-ui", "sans-serif"], is_external=True),
        secondary=FontRole("Lora", ["Georgia", "serif"], is_external=True),
        mono=FontRole("Fira Code", ["monospace"], is_external=True),
        performance=PerformanceSettings(preload_fonts=preload),
    )
    return dataclasses.replace(theme, id="fonts", advanced_typography=advanced)


@pytest.fixture
def make_store(qapp, fast_config):
    """Build ConfigurationStores that are closed after the test."""
    stores = []

    def _make(**kwargs):
        kwargs.setdefault("store", MemoryStore())
        kwargs.setdefault("config", fast_config)
        store = ConfigurationStore(**kwargs)
        stores.append(store)
        return store

    yield _make
    for store in stores:
        store.close()


# ========== REDUCER ==========

def test_reducer_handles_every_action_type():
    reducer = ThemeReducer()
    assert set(reducer.get_registered_strategies()) == set(ActionType)


def test_reducer_registration_must_be_exhaustive():
    """Registering handlers for only part of the enum fails at construction."""
    class PartialReducer(EnumDispatchService[ActionType]):
        def __init__(self):
            super().__init__()
            self._register_handlers(ActionType, {ActionType.SET_THEME: lambda state, action: state})

        def _determine_strategy(self, state, action):
            return action.type

    with pytest.raises(ValueError, match="UPDATE_THEME"):
        PartialReducer()


def test_reducer_font_state_is_family_keyed():
    reducer = ThemeReducer()
    state = initial_state()
    state = reducer.reduce(state, SetFontLoadingState("A", FontLoadingStatus.LOADING))
    state = reducer.reduce(state, SetFontLoadingState("B", FontLoadingStatus.LOADING))
    loading = state
    state = reducer.reduce(state, SetFontLoadingState("A", FontLoadingStatus.LOADED))
    assert state.typography_loading
    state = reducer.reduce(state, SetFontLoadingState("B", FontLoadingStatus.ERROR))

    assert not state.typography_loading
    assert state.font_loading_state == {"A": FontLoadingStatus.LOADED, "B": FontLoadingStatus.ERROR}
    assert loading.font_loading_state == {"A": FontLoadingStatus.LOADING, "B": FontLoadingStatus.LOADING}


def test_reducer_preview_and_reset():
    reducer = ThemeReducer()
    dark = create_dark_theme()
    state = reducer.reduce(initial_state(), UpdateTheme(create_default_theme()))
    state = reducer.reduce(state, SetPreviewTheme(dark))
    assert state.active_theme is state.current_theme
    state = reducer.reduce(state, SetPreviewMode(True))
    assert state.active_theme is dark
    state = reducer.reduce(state, SetError("oops"))

    reset = reducer.reduce(state, ResetTheme(create_default_theme()))
    assert reset.preview_theme is None and not reset.preview_mode
    assert reset.error is None and not reset.has_unsaved_changes

    saved = reducer.reduce(state, SaveTheme())
    assert not saved.has_unsaved_changes
    assert state.has_unsaved_changes


# ========== APPLICATION MANAGER ==========

def test_incremental_updates_coalesce_into_one_application(qapp, wait_until):
    """N incremental updates inside the quiet window produce one write: their union, last write wins."""
    surface = MemorySurface()
    manager = ApplicationManager(surface)
    applied = []
    manager.properties_applied.connect(applied.append)
    manager.apply_immediate({"a": "0", "b": "0"})

    for i in range(5):
        manager.apply_incremental({"a": str(i)})
    manager.apply_incremental({"c": "x"})

    assert manager.application_count == 1
    assert wait_until(lambda: manager.application_count == 2)
    QTest.qWait(50)

    assert manager.application_count == 2
    assert surface.writes[-1] == {"a": "4", "c": "x"}
    assert applied[-1] == {"a": "4", "c": "x"}
    assert manager.get_current_properties() == {"a": "4", "b": "0", "c": "x"}


def test_flush_applies_pending_buffer(qapp):
    manager = ApplicationManager(MemorySurface(), ThemeEngineConfig(visual_debounce_ms=5000))
    manager.apply_incremental({"a": "1"})
    assert not manager.has_properties()

    assert manager.flush() is True
    assert manager.get_current_properties() == {"a": "1"}
    assert manager.flush() is False


def test_apply_immediate_replaces_whole_set(qapp):
    surface = MemorySurface()
    manager = ApplicationManager(surface)
    manager.apply_immediate({"a": "1", "b": "2"})
    manager.apply_incremental({"b": "3"})
    manager.apply_immediate({"a": "5"})

    assert surface.properties == {"a": "5"}
    assert not manager.has_pending()

    manager.reset()
    assert not manager.has_properties()
    assert surface.properties == {}


def test_validate_properties_checks_strings(qapp):
    manager = ApplicationManager(MemorySurface())
    result = manager.validate_properties({
        "color-primary": "nope",
        "spacing-md": "1 rem",
        "font-family": " ",
        "shadow-sm": "anything goes",
        "typography-input-text-letter-spacing": "-0.01em",
    })
    assert sorted(e.field for e in result.errors) == ["color-primary", "font-family", "spacing-md"]


# ========== RESOURCE LOADER ==========

def test_font_failures_are_isolated(qapp, wait_until, make_font_loader):
    """One failing font does not block the others."""
    loader = ResourceLoader(make_font_loader(failing={"B"}))
    states = {}
    loader.font_state_changed.connect(lambda family, status: states.__setitem__(family, status))

    started = loader.load_fonts([FontReference("A"), FontReference("B"), FontReference("A"), FontReference("C")])

    assert started == ["A", "B", "C"]
    assert set(states.values()) == {FontLoadingStatus.LOADING}
    assert wait_until(lambda: loader.pending_count() == 0)
    assert states == {"A": FontLoadingStatus.LOADED, "B": FontLoadingStatus.ERROR, "C": FontLoadingStatus.LOADED}
    loader.cleanup()


def test_font_already_in_flight_is_not_restarted(qapp, wait_until, make_font_loader):
    fonts = make_font_loader(delay_s=0.1)
    loader = ResourceLoader(fonts)
    assert loader.load_font(FontReference("A")) is True
    assert loader.load_font(FontReference("A")) is False
    assert wait_until(lambda: loader.pending_count() == 0)
    assert fonts.requested == ["A"]
    loader.cleanup()


class MistaggingFontLoader:
    """Loader whose errors name a different family than the one requested."""

    def load(self, font):
        raise ResourceLoadError(f"{font.family} Bold", "variant missing")


def test_loader_errors_settle_the_requested_family(qapp, wait_until):
    loader = ResourceLoader(MistaggingFontLoader())
    states = []
    loader.font_state_changed.connect(lambda family, status: states.append((family, status)))

    loader.load_font(FontReference("Inter"))

    assert wait_until(lambda: loader.pending_count() == 0)
    assert not loader.is_loading("Inter")
    assert states == [("Inter", FontLoadingStatus.LOADING), ("Inter", FontLoadingStatus.ERROR)]
    loader.cleanup()


def test_missing_loader_reports_error(qapp):
    loader = ResourceLoader()
    states = []
    loader.font_state_changed.connect(lambda family, status: states.append(status))
    loader.load_font(FontReference("A"))
    assert states == [FontLoadingStatus.LOADING, FontLoadingStatus.ERROR]


# ========== CONFIGURATION STORE ==========

def test_update_primary_color_changes_only_that_color(make_store):
    store = make_store()
    before = store.application.get_current_properties()
    created = store.current_theme.updated_at

    result = store.update({"colors": {"primary": "#FF0000"}})
    store.application.flush()
    after = store.application.get_current_properties()

    assert result.is_valid
    assert after["color-primary"] == "#FF0000"
    for key, value in before.items():
        if key.startswith("color-") and key != "color-primary":
            assert after[key] == value
    assert store.state.has_unsaved_changes
    assert store.current_theme.updated_at >= created


def test_rejected_update_keeps_state(make_store):
    """A rejected update changes nothing but the error."""
    errors = []
    store = make_store(on_error=errors.append)
    signalled = []
    store.error_occurred.connect(signalled.append)
    theme = store.current_theme

    result = store.update({"colors": {"primary": "bad"}, "spacing": {"md": -1}})

    assert len(result.errors) == 2
    assert store.current_theme is theme
    assert not store.state.has_unsaved_changes
    assert store.state.error.startswith("Validation failed")
    assert errors == signalled == [store.state.error]
    assert not store.is_autosave_pending()

    store.clear_error()
    assert store.state.error is None


def test_update_typography_without_baseline_is_rejected(make_store):
    theme = dataclasses.replace(create_default_theme(), advanced_typography=None)
    errors = []
    store = make_store(initial_theme=theme, on_error=errors.append)

    ok = store.update_typography({"primary": {"family": "Roboto", "fallbacks": ["sans-serif"]}})

    assert ok is False
    assert store.state.error is not None
    assert errors == [store.state.error]
    assert store.current_theme is theme


def test_update_typography_rederives_legacy_family(make_store):
    store = make_store()

    assert store.update_typography({"primary": {"family": "Roboto", "fallbacks": ["sans-serif"]}})
    store.application.flush()

    assert store.current_theme.typography.font_family == "Roboto, sans-serif"
    props = store.application.get_current_properties()
    assert props["font-family"] == "Roboto, sans-serif"
    assert props["font-role-primary"] == "Roboto, sans-serif"
    assert store.update_typography({"primray": {}}) is False


def test_set_theme_validates(make_store):
    store = make_store()
    changed = []
    store.theme_changed.connect(changed.append)
    bad = dataclasses.replace(create_dark_theme(), id="")

    assert store.set_theme(bad) is False
    assert store.set_theme(create_dark_theme()) is True
    assert store.current_theme.id == "dark"
    assert store.state.has_unsaved_changes
    assert [t.id for t in changed] == ["dark"]
    assert store.application.get_current_properties()["color-background"] == "#111827"


def test_accepted_theme_is_detached_from_caller(make_store):
    store = make_store()
    dark = create_dark_theme()
    assert store.set_theme(dark)
    store.application.flush()

    dark.colors.primary = "not-a-color"

    assert store.current_theme.colors.primary != "not-a-color"
    assert store.validate().is_valid
    assert store.compiled_properties == store.compile(store.current_theme)


def test_previewed_theme_is_detached_from_caller(make_store):
    store = make_store()
    candidate = create_dark_theme()
    store.preview.enable_preview(candidate)

    candidate.colors.background = "not-a-color"

    assert store.preview.preview_theme.colors.background == "#111827"
    assert store.preview.commit_preview() is True
    assert store.validate().is_valid


def test_preview_isolation(make_store):
    """enable then disable leaves the current theme and dirty flag untouched."""
    store = make_store()
    current = store.current_theme

    result = store.preview.enable_preview(create_dark_theme())

    assert result.is_valid
    assert store.preview.is_previewing
    assert store.active_theme.id == "dark"
    assert store.application.get_current_properties()["color-background"] == "#111827"
    assert not store.state.has_unsaved_changes
    assert not store.is_autosave_pending()

    assert store.preview.disable_preview() is True
    assert store.current_theme is current
    assert not store.state.has_unsaved_changes
    assert store.application.get_current_properties()["color-background"] == "#FFFFFF"
    assert store.preview.disable_preview() is False


def test_preview_commit_goes_through_set(make_store):
    store = make_store()
    dark = create_dark_theme()
    store.preview.enable_preview(dark)

    assert store.preview.commit_preview() is True

    assert store.current_theme == dark
    assert not store.preview.is_previewing
    assert store.preview.preview_theme is None
    assert store.state.has_unsaved_changes
    assert store.is_autosave_pending()
    assert store.preview.commit_preview() is False


def test_preview_rejects_invalid_candidate(make_store):
    store = make_store()
    bad = dataclasses.replace(create_dark_theme(), name="")
    assert not store.preview.enable_preview(bad).is_valid
    assert not store.preview.is_previewing
    assert store.state.error is not None


def test_preview_can_be_disabled_by_config(make_store):
    store = make_store(config=ThemeEngineConfig(enable_preview=False))
    assert not store.preview.enable_preview(create_dark_theme()).is_valid
    assert not store.preview.is_previewing


def test_updates_during_preview_do_not_autosave_until_preview_ends(make_store):
    store = make_store()
    store.preview.enable_preview(create_dark_theme())

    store.update({"colors": {"primary": "#FF0000"}})
    store.application.flush()

    assert store.application.get_current_properties()["color-primary"] == "#60A5FA"
    assert not store.is_autosave_pending()

    store.preview.disable_preview()
    assert store.is_autosave_pending()
    assert store.application.get_current_properties()["color-primary"] == "#FF0000"


def test_autosave_after_quiet_window(make_store, wait_until):
    """A burst of updates yields exactly one save once edits stop."""
    backing = CountingStore()
    store = make_store(store=backing)

    for color in ("#FF0000", "#00FF00", "#0000FF"):
        store.update({"colors": {"primary": color}})
        QTest.qWait(10)

    assert "form-theme" not in backing.writes
    assert wait_until(lambda: not store.state.has_unsaved_changes)
    QTest.qWait(100)

    assert backing.writes["form-theme"] == 1
    assert store.persistence.load().colors.primary == "#0000FF"


def test_close_performs_pending_autosave(make_store):
    backing = MemoryStore()
    store = make_store(store=backing, config=ThemeEngineConfig(autosave_delay_ms=60000))
    store.update({"name": "Edited"})

    store.close()

    assert store.persistence.load().name == "Edited"
    assert not store.state.has_unsaved_changes


def test_persistence_disabled_never_saves(make_store):
    backing = MemoryStore()
    store = make_store(store=backing, config=ThemeEngineConfig(enable_persistence=False))
    store.update({"name": "Edited"})
    assert not store.is_autosave_pending()
    assert store.save() is False
    assert backing.data == {}


def test_save_failure_is_reported(make_store, failing_store):
    store = make_store(store=failing_store)
    store.update({"name": "Edited"})

    assert store.save() is False
    assert store.state.error is not None
    assert store.state.has_unsaved_changes
    assert not store.state.is_loading


def test_reset_restores_default(make_store):
    store = make_store()
    store.update({"colors": {"primary": "#FF0000"}})
    store.save()
    store.save_snapshot()
    store.preview.enable_preview(create_dark_theme())

    store.reset()

    assert store.current_theme.colors.primary == create_default_theme().colors.primary
    assert not store.preview.is_previewing
    assert not store.state.has_unsaved_changes
    assert store.state.font_loading_state == {}
    assert store.persistence.load() is None
    assert store.list_snapshots() == ["default"]
    assert store.application.get_current_properties()["color-primary"] == "#3B82F6"


def test_restore_adopts_persisted_theme(make_store):
    dark = create_dark_theme()
    store = make_store(store=MemoryStore({"form-theme": theme_to_json(dark)}))

    assert store.restore() is True
    assert store.current_theme == dark
    assert not store.state.has_unsaved_changes
    assert not store.is_autosave_pending()


def test_restore_ignores_malformed_payload(make_store):
    store = make_store(store=MemoryStore({"form-theme": "{oops"}))
    assert store.restore() is False
    assert store.current_theme.id == "default"


def test_snapshots_through_store(make_store):
    store = make_store()
    store.set_theme(create_dark_theme())
    assert store.save_snapshot() == "form-theme-snapshot-dark"
    store.reset()

    assert store.load_theme("dark") is True
    assert store.current_theme.id == "dark"
    assert not store.state.has_unsaved_changes

    assert store.load_theme("missing") is False
    assert store.state.error is not None
    assert store.delete_snapshot("dark") is True


def test_import_and_export_through_store(make_store):
    store = make_store()
    text = store.export_theme(create_dark_theme())

    theme, result = store.import_theme(text)
    assert result.is_valid
    assert store.current_theme == theme
    assert store.state.has_unsaved_changes

    theme, result = store.import_theme('{"colors": {"primary": "nope"}}')
    assert theme is None
    assert store.current_theme.id == "dark"
    assert store.state.error is not None


def test_font_resilience_through_store(make_store, make_font_loader, wait_until):
    """Three external fonts with one failing: loading clears with 2 loaded and 1 error."""
    fonts = make_font_loader(failing={"Lora"})
    store = make_store(font_loader=fonts)

    assert store.set_theme(external_fonts_theme())
    assert store.state.typography_loading
    assert wait_until(lambda: not store.state.typography_loading)

    assert store.state.font_loading_state == {
        "Inter": FontLoadingStatus.LOADED,
        "Lora": FontLoadingStatus.ERROR,
        "Fira Code": FontLoadingStatus.LOADED,
    }

    # Tracked families are not requested again on repeated reference
    store.update({"name": "Renamed"})
    assert sorted(fonts.requested) == ["Fira Code", "Inter", "Lora"]

    assert store.retry_font("Lora") is True
    assert store.state.font_status("Lora") is FontLoadingStatus.LOADING
    assert wait_until(lambda: not store.state.typography_loading)
    assert store.state.font_status("Lora") is FontLoadingStatus.ERROR


def test_fonts_not_loaded_without_preload(make_store, make_font_loader):
    fonts = make_font_loader()
    store = make_store(font_loader=fonts)
    store.set_theme(external_fonts_theme(preload=False))
    assert store.state.font_loading_state == {}
    assert fonts.requested == []


def test_accessibility_audit_and_compile_through_store(make_store):
    store = make_store()
    assert store.audit_accessibility().is_valid
    assert store.validate().is_valid
    assert store.compile() == store.compiled_properties


# ========== CHANGE TRACKER ==========

def test_change_tracker_flags_rapid_changes():
    times = iter([0.0, 0.005, 0.105])
    tracker = ThemeChangeTracker(frame_budget_ms=16.0, clock=lambda: next(times))

    tracker.record("a")
    tracker.record("a")
    tracker.record("a")

    stats = tracker.stats()
    assert stats.count == 3
    assert stats.rapid_changes == 1
    assert stats.average_interval_ms == pytest.approx(52.5)

    tracker.reset()
    assert tracker.count == 0
