"""
Collaborator protocols and engine configuration.

Structural contracts for the engine's external collaborators (durable
storage, font loading, rendering surfaces) plus the process-wide engine
configuration.
"""

from .theme_config import ThemeEngineConfig, set_theme_config, get_theme_config
from .storage import KeyValueStore
from .property_surface import PropertySurface
from .font_loader import FontLoader, FontReference

__all__ = [
    "ThemeEngineConfig",
    "set_theme_config",
    "get_theme_config",
    "KeyValueStore",
    "PropertySurface",
    "FontLoader",
    "FontReference",
]
