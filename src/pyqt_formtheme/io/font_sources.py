"""
Local font loader.

Resolves a FontReference to font files on disk and registers them with
QFontDatabase. Families already installed on the system are accepted
without touching the disk.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union
from PyQt6.QtGui import QFontDatabase

from pyqt_formtheme.protocols.font_loader import FontReference
from pyqt_formtheme.theming.exceptions import ResourceLoadError

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")


def _normalize(name: str) -> str:
    return "".join(name.split()).replace("-", "").replace("_", "").lower()


class LocalFontLoader:
    """
    FontLoader that registers font files from local directories.

    Lookup order: the reference's ``source`` (a file or a directory), then
    each search path. In a directory, files whose normalized stem starts
    with the normalized family name match (``RobotoSlab-Bold.ttf`` matches
    "Roboto Slab").
    """

    def __init__(self, search_paths: Iterable[Union[str, Path]] = (), accept_system_fonts: bool = True):
        self.search_paths = [Path(p) for p in search_paths]
        self.accept_system_fonts = accept_system_fonts

    def resolve(self, font: FontReference) -> List[Path]:
        """Font files that provide ``font.family``."""
        if font.source:
            source = Path(font.source).expanduser()
            if source.is_file():
                return [source]
            if source.is_dir():
                return self._search(source, font.family)
            return []

        files: List[Path] = []
        for directory in self.search_paths:
            files.extend(self._search(directory, font.family))
        return files

    @staticmethod
    def _search(directory: Path, family: str) -> List[Path]:
        if not directory.is_dir():
            return []
        wanted = _normalize(family)
        return sorted(
            path for path in directory.iterdir()
            if path.suffix.lower() in FONT_EXTENSIONS and _normalize(path.stem).startswith(wanted)
        )

    def load(self, font: FontReference) -> None:
        if self.accept_system_fonts and not font.source and font.family in QFontDatabase.families():
            logger.debug(f"Font '{font.family}' is installed on the system")
            return

        files = self.resolve(font)
        if not files:
            raise ResourceLoadError(font.family, "no font files found")

        registered = set()
        for path in files:
            font_id = QFontDatabase.addApplicationFont(str(path))
            if font_id == -1:
                logger.warning(f"Qt rejected font file {path}")
                continue
            registered.update(QFontDatabase.applicationFontFamilies(font_id))

        if not registered:
            raise ResourceLoadError(font.family, f"none of {len(files)} font file(s) could be registered")
        if _normalize(font.family) not in {_normalize(name) for name in registered}:
            raise ResourceLoadError(
                font.family, f"registered files provide {sorted(registered)} instead")
        logger.debug(f"Registered {len(files)} file(s) for font '{font.family}'")
