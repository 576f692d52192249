"""Rendering surface protocol for compiled properties."""

from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class PropertySurface(Protocol):
    """Anything that accepts a flat string-to-string property mapping."""

    def apply(self, properties: Mapping[str, str]) -> None:
        """Merge a (possibly partial) mapping into the surface in one visible update."""
        ...

    def clear(self) -> None:
        ...
