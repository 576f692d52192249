"""
Key-value stores for theme persistence.

Both stores satisfy the KeyValueStore protocol: string keys, string values,
``get`` returning None for absent keys.
"""

import logging
from typing import Dict, Optional
from PyQt6.QtCore import QSettings

from pyqt_formtheme.io.exceptions import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZATION = "pyqt-formtheme"
DEFAULT_APPLICATION = "themes"


class MemoryStore:
    """Process-local store, useful for tests and for running without durable storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class QSettingsStore:
    """
    Store backed by QSettings.

    Args:
        settings: An existing QSettings instance. When omitted, a native
            QSettings for ``organization``/``application`` is created.
        group: Optional settings group all keys are nested under.
    """

    def __init__(self, settings: Optional[QSettings] = None,
                 organization: str = DEFAULT_ORGANIZATION,
                 application: str = DEFAULT_APPLICATION,
                 group: Optional[str] = None):
        self._settings = settings if settings is not None else QSettings(organization, application)
        self._group = group

    @property
    def settings(self) -> QSettings:
        return self._settings

    def _key(self, key: str) -> str:
        return f"{self._group}/{key}" if self._group else key

    def get(self, key: str) -> Optional[str]:
        value = self._settings.value(self._key(key))
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        if not self._settings.isWritable():
            raise PersistenceError(f"Settings storage is read-only: {self._settings.fileName()}")
        self._settings.setValue(self._key(key), value)
        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            raise PersistenceError(f"Failed to write '{key}' to {self._settings.fileName()}: "
                                   f"{self._settings.status().name}")

    def remove(self, key: str) -> None:
        self._settings.remove(self._key(key))
        self._settings.sync()
