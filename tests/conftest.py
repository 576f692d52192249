"""pytest configuration and fixtures for pyqt-formtheme tests."""

import os
import threading

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from pyqt_formtheme.protocols.theme_config import ThemeEngineConfig, set_theme_config
from pyqt_formtheme.theming.exceptions import ResourceLoadError


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def wait_until(qapp):
    """Process Qt events until ``predicate()`` is true or ``timeout_ms`` elapses."""
    def _wait(predicate, timeout_ms=3000, step_ms=10):
        waited = 0
        while not predicate():
            if waited >= timeout_ms:
                return False
            QTest.qWait(step_ms)
            waited += step_ms
        return True
    return _wait


@pytest.fixture(autouse=True)
def default_theme_config():
    """Every test starts from the default engine configuration."""
    set_theme_config(None)
    yield
    set_theme_config(None)


@pytest.fixture
def fast_config():
    """Short quiet windows so timer-driven behavior settles quickly."""
    return ThemeEngineConfig(visual_debounce_ms=16, autosave_delay_ms=60)


class FakeFontLoader:
    """FontLoader that succeeds except for families listed in ``failing``."""

    def __init__(self, failing=(), delay_s=0.02):
        self.failing = set(failing)
        self.delay_s = delay_s
        self.requested = []
        self._lock = threading.Lock()

    def load(self, font):
        with self._lock:
            self.requested.append(font.family)
        threading.Event().wait(self.delay_s)
        if font.family in self.failing:
            raise ResourceLoadError(font.family, "server returned 404")


class FailingStore:
    """KeyValueStore whose writes always fail."""

    def get(self, key):
        return None

    def set(self, key, value):
        raise OSError("disk full")

    def remove(self, key):
        raise OSError("disk full")


@pytest.fixture
def font_loader():
    return FakeFontLoader()


@pytest.fixture
def make_font_loader():
    return FakeFontLoader


@pytest.fixture
def failing_store():
    return FailingStore()
