"""Durable key-value store protocol used by theme persistence."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed, string-valued durable store.

    This is the only contract the persistence layer requires. Named
    snapshots are tracked through an index key, so no key enumeration is
    needed.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored string or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...
