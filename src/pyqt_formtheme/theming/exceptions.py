"""Theming exceptions."""


class ConfigurationError(Exception):
    """Raised when a theme operation cannot be performed on the current configuration."""


class ResourceLoadError(Exception):
    """Raised by font loaders when a font resource cannot be loaded."""

    def __init__(self, family: str, message: str):
        super().__init__(f"Failed to load font '{family}': {message}")
        self.family = family
