"""IO exceptions."""


class PersistenceError(Exception):
    """Raised when a theme cannot be written to or read from a key-value store."""
