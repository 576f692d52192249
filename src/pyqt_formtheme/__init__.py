"""
pyqt-formtheme: theme and typography configuration engine for PyQt6 form builders.

Holds a structured visual configuration (a Theme), validates it, compiles it
into a flat set of named style values and keeps those applied to a live
surface with frame-coalesced updates. External fonts load on background
threads; themes persist to a key-value store with named snapshots,
import/export and preview-without-commit.

Architecture:
- Tier 1 (Protocols): Collaborator contracts and engine configuration
- Tier 2 (Core): Debounce timer, background tasks, timing
- Tier 3 (Theming): Theme model, validation, compilation, surfaces
- Tier 4 (IO): Stores, persistence, font sources
- Tier 5 (Services): Reducer, application, resources, ConfigurationStore
"""

__version__ = "0.1.0"

from .protocols import ThemeEngineConfig, set_theme_config, get_theme_config
from .theming import (
    Theme,
    ValidationResult,
    compile_properties,
    create_default_theme,
    create_dark_theme,
    validate_theme,
    MemorySurface,
    CssTextSurface,
    QtStyleSurface,
)
from .io import MemoryStore, QSettingsStore, PersistenceAdapter, LocalFontLoader
from .services import ConfigurationStore, EngineState

__all__ = [
    "__version__",
    "ThemeEngineConfig",
    "set_theme_config",
    "get_theme_config",
    "Theme",
    "ValidationResult",
    "compile_properties",
    "create_default_theme",
    "create_dark_theme",
    "validate_theme",
    "MemorySurface",
    "CssTextSurface",
    "QtStyleSurface",
    "MemoryStore",
    "QSettingsStore",
    "PersistenceAdapter",
    "LocalFontLoader",
    "ConfigurationStore",
    "EngineState",
]
