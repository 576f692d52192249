"""Tests for collaborator protocols and engine configuration."""

from pyqt_formtheme.io import LocalFontLoader, MemoryStore, QSettingsStore
from pyqt_formtheme.protocols import (
    FontLoader,
    FontReference,
    KeyValueStore,
    PropertySurface,
    ThemeEngineConfig,
    get_theme_config,
    set_theme_config,
)
from pyqt_formtheme.theming import CssTextSurface, MemorySurface, QtStyleSurface
from pyqt_formtheme.theming.models import FontRole


def test_stores_satisfy_key_value_store(qapp, tmp_path):
    from PyQt6.QtCore import QSettings

    settings = QSettings(str(tmp_path / "themes.ini"), QSettings.Format.IniFormat)
    assert isinstance(MemoryStore(), KeyValueStore)
    assert isinstance(QSettingsStore(settings), KeyValueStore)


def test_surfaces_satisfy_property_surface(qapp):
    assert isinstance(MemorySurface(), PropertySurface)
    assert isinstance(CssTextSurface(), PropertySurface)
    assert isinstance(QtStyleSurface(), PropertySurface)


def test_local_font_loader_satisfies_font_loader():
    assert isinstance(LocalFontLoader(), FontLoader)


def test_font_reference_from_role():
    role = FontRole("Inter", ["system-ui"], is_external=True, source="/fonts/inter")
    ref = FontReference.from_role(role)
    assert ref == FontReference("Inter", "/fonts/inter")
    assert ref.fallbacks == ["system-ui"]
    role.fallbacks.append("sans-serif")
    assert ref.fallbacks == ["system-ui"]


def test_theme_config_defaults_and_override():
    config = get_theme_config()
    assert config.visual_debounce_ms == 16
    assert config.autosave_delay_ms == 1000
    assert config.persistence_key == "form-theme"

    set_theme_config(ThemeEngineConfig(autosave_delay_ms=250))
    assert get_theme_config().autosave_delay_ms == 250

    set_theme_config(None)
    assert get_theme_config().autosave_delay_ms == 1000
