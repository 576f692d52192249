"""Engine configuration.

Provides a process-wide default configuration for theme engines. Individual
ConfigurationStore instances may override it by passing their own
ThemeEngineConfig.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class ThemeEngineConfig:
    """Tuning knobs for a theme engine.

    Attributes:
        visual_debounce_ms: Quiet window for coalescing incremental property writes
        autosave_delay_ms: Quiet window before unsaved changes are persisted
        persistence_key: Storage key of the "current theme" slot
        snapshot_key_prefix: Prefix of named snapshot keys (followed by the theme id)
        snapshot_index_key: Storage key holding the list of snapshot ids
        enable_persistence: Whether the store restores, auto-saves and saves themes
        enable_preview: Whether preview mode may be engaged
        frame_budget_ms: Active-theme changes closer together than this are reported
        performance_logger_name: Logger receiving timing output
        performance_log_filename: File name used by configure_performance_logging()
        log_dir: Directory for log files (defaults to ~/.local/share/pyqt_formtheme/logs)
    """

    visual_debounce_ms: int = 16
    autosave_delay_ms: int = 1000
    persistence_key: str = "form-theme"
    snapshot_key_prefix: str = "form-theme-snapshot-"
    snapshot_index_key: str = "form-theme-index"
    enable_persistence: bool = True
    enable_preview: bool = True
    frame_budget_ms: float = 16.0
    performance_logger_name: str = "pyqt_formtheme.performance"
    performance_log_filename: str = "performance.log"
    log_dir: Optional[str] = None


# Global config instance (set by application)
_theme_config: Optional[ThemeEngineConfig] = None


def set_theme_config(config: Optional[ThemeEngineConfig]) -> None:
    """Set the process-wide theme engine configuration (None restores defaults).

    Args:
        config: ThemeEngineConfig instance
    """
    global _theme_config
    _theme_config = config


def get_theme_config() -> ThemeEngineConfig:
    """Get the current theme engine configuration.

    Returns:
        Current ThemeEngineConfig or default if not set
    """
    if _theme_config is None:
        return ThemeEngineConfig()
    return _theme_config
