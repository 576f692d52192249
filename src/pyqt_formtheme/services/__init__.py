"""
Service layer of the theme engine.

The reducer and state, the configuration store orchestrating validation,
compilation, application, font loading and persistence, and the preview
mode layered on top of it.
"""

from .enum_dispatch_service import EnumDispatchService
from .theme_reducer import ActionType, EngineState, ThemeReducer, initial_state
from .application_manager import ApplicationManager
from .resource_loader import ResourceLoader
from .change_tracker import ThemeChangeTracker
from .preview_controller import PreviewController
from .configuration_store import ConfigurationStore

__all__ = [
    "EnumDispatchService",
    "ActionType",
    "EngineState",
    "ThemeReducer",
    "initial_state",
    "ApplicationManager",
    "ResourceLoader",
    "ThemeChangeTracker",
    "PreviewController",
    "ConfigurationStore",
]
