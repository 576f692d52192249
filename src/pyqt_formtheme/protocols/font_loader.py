"""Font resource loading protocol."""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from pyqt_formtheme.theming.models import FontRole


@dataclass(frozen=True)
class FontReference:
    """What a FontLoader needs to fetch one externally hosted family."""

    family: str
    source: Optional[str] = None
    fallbacks: List[str] = field(default_factory=list, compare=False, hash=False)

    @classmethod
    def from_role(cls, role: "FontRole") -> "FontReference":
        return cls(family=role.family, source=role.source, fallbacks=list(role.fallbacks))


@runtime_checkable
class FontLoader(Protocol):
    """Loads one font family.

    ``load`` runs on a worker thread. It returns when the font is usable and
    raises (preferably ResourceLoadError) when it is not.
    """

    def load(self, font: FontReference) -> None:
        ...
