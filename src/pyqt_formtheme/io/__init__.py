"""
Theme persistence and resource IO.

Key-value stores, the theme persistence adapter and the local font loader.
"""

from .exceptions import PersistenceError
from .stores import MemoryStore, QSettingsStore
from .persistence import PersistenceAdapter
from .font_sources import LocalFontLoader

__all__ = [
    "PersistenceError",
    "MemoryStore",
    "QSettingsStore",
    "PersistenceAdapter",
    "LocalFontLoader",
]
