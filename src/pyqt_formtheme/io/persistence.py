"""
Theme persistence over a key-value store.

Themes are stored as JSON under string keys: one "current theme" slot plus
any number of named snapshots (``<snapshot_key_prefix><theme id>``). The
ids of saved snapshots are kept as a JSON list under the snapshot index
key, so the store only needs get/set/remove.
"""

import json
import logging
from typing import List, Optional, Tuple

from pyqt_formtheme.io.exceptions import PersistenceError
from pyqt_formtheme.io.stores import MemoryStore
from pyqt_formtheme.protocols.storage import KeyValueStore
from pyqt_formtheme.protocols.theme_config import ThemeEngineConfig, get_theme_config
from pyqt_formtheme.theming.models import Theme
from pyqt_formtheme.theming.serialization import theme_from_json, theme_to_json
from pyqt_formtheme.theming.validation import ValidationError, ValidationResult, validate_theme

logger = logging.getLogger(__name__)

_AVAILABILITY_KEY = "__pyqt_formtheme_availability__"


class PersistenceAdapter:
    """
    Saves, loads and removes themes in a KeyValueStore.

    Error policy:
        save   -> raises PersistenceError
        load   -> logs and returns None for absent, unreadable or malformed payloads
        remove -> logs failures
    """

    def __init__(self, store: Optional[KeyValueStore] = None,
                 config: Optional[ThemeEngineConfig] = None):
        self.store = store if store is not None else MemoryStore()
        self._config = config or get_theme_config()

    @property
    def current_key(self) -> str:
        return self._config.persistence_key

    def is_storage_available(self) -> bool:
        """Check the store with a write/read/remove cycle."""
        try:
            self.store.set(_AVAILABILITY_KEY, "1")
            available = self.store.get(_AVAILABILITY_KEY) == "1"
            self.store.remove(_AVAILABILITY_KEY)
        except Exception as e:
            logger.warning(f"Theme storage unavailable: {e}")
            return False
        return available

    # ========== SINGLE SLOT ==========

    def save(self, theme: Theme, key: Optional[str] = None) -> None:
        key = key or self.current_key
        payload = theme_to_json(theme)
        try:
            self.store.set(key, payload)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to save theme '{theme.id}' under '{key}': {e}") from e
        logger.debug(f"Saved theme '{theme.id}' under '{key}'")

    def load(self, key: Optional[str] = None) -> Optional[Theme]:
        key = key or self.current_key
        try:
            payload = self.store.get(key)
        except Exception as e:
            logger.error(f"Failed to read '{key}' from theme storage: {e}", exc_info=True)
            return None
        if payload is None:
            return None

        try:
            theme = theme_from_json(payload)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring malformed theme payload under '{key}': {e}")
            return None
        logger.debug(f"Loaded theme '{theme.id}' from '{key}'")
        return theme

    def remove(self, key: Optional[str] = None) -> None:
        key = key or self.current_key
        try:
            self.store.remove(key)
        except Exception as e:
            logger.error(f"Failed to remove '{key}' from theme storage: {e}", exc_info=True)

    # ========== SNAPSHOTS ==========

    def snapshot_key(self, theme_id: str) -> str:
        return f"{self._config.snapshot_key_prefix}{theme_id}"

    def _is_reserved(self, key: str) -> bool:
        return key in (self.current_key, self._config.snapshot_index_key, _AVAILABILITY_KEY)

    def list_snapshots(self) -> List[str]:
        """Ids of saved snapshots, in save order."""
        try:
            payload = self.store.get(self._config.snapshot_index_key)
        except Exception as e:
            logger.error(f"Failed to read snapshot index: {e}", exc_info=True)
            return []
        if payload is None:
            return []
        try:
            ids = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed snapshot index: {e}")
            return []
        if not isinstance(ids, list):
            logger.warning("Ignoring snapshot index that is not a list")
            return []
        return [i for i in ids if isinstance(i, str)]

    def _write_index(self, ids: List[str]) -> None:
        try:
            self.store.set(self._config.snapshot_index_key, json.dumps(ids))
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to update snapshot index: {e}") from e

    def save_snapshot(self, theme: Theme) -> str:
        """Save ``theme`` as a named snapshot keyed by its id. Returns the storage key."""
        key = self.snapshot_key(theme.id)
        if self._is_reserved(key):
            raise PersistenceError(f"Snapshot id '{theme.id}' maps onto reserved key '{key}'")
        self.save(theme, key)
        ids = self.list_snapshots()
        if theme.id not in ids:
            ids.append(theme.id)
            self._write_index(ids)
        logger.info(f"Saved snapshot '{theme.id}'")
        return key

    def load_snapshot(self, theme_id: str) -> Optional[Theme]:
        key = self.snapshot_key(theme_id)
        if self._is_reserved(key):
            return None
        return self.load(key)

    def delete_snapshot(self, theme_id: str) -> bool:
        """Delete a named snapshot. Returns False if it was not indexed."""
        ids = self.list_snapshots()
        key = self.snapshot_key(theme_id)
        if not self._is_reserved(key):
            self.remove(key)
        if theme_id not in ids:
            return False
        ids.remove(theme_id)
        try:
            self._write_index(ids)
        except PersistenceError as e:
            logger.error(str(e), exc_info=True)
        logger.info(f"Deleted snapshot '{theme_id}'")
        return True

    # ========== IMPORT / EXPORT ==========

    def export_theme(self, theme: Theme) -> str:
        return theme_to_json(theme)

    def import_theme(self, text: str) -> Tuple[Optional[Theme], ValidationResult]:
        """
        Parse and validate exported theme text.

        Returns the theme (None if it cannot be parsed or is invalid) and the
        validation result describing why.
        """
        try:
            theme = theme_from_json(text)
        except (ValueError, TypeError) as e:
            logger.warning(f"Rejected theme import: {e}")
            return None, ValidationResult([ValidationError("theme", str(e), None)])

        result = validate_theme(theme)
        if not result.is_valid:
            logger.warning(f"Rejected theme import '{theme.id}': {result.summary()}")
            return None, result
        return theme, result
