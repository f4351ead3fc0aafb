"""Settings persistence for per-document state.

Remembers where the cursor was in each file so that reopening a document
puts the cursor back. Settings are stored in an OS-appropriate location and
survive application restarts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .position import Position

logger = logging.getLogger(__name__)


class SettingsPersistence:
    """Manages persistent storage of per-document settings.

    Settings are stored in a JSON file in the user's config directory,
    indexed by the absolute path of the document being edited.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir(EditorConstants.APP_NAME))
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create config directory %s: %s", self._config_dir, e)

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load all settings from disk, or an empty mapping if unreadable."""
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._settings_file, e)
            self._settings_cache = {}
            return self._settings_cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Write all settings to disk atomically (temp file + rename)."""
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix(EditorConstants.ATOMIC_SAVE_SUFFIX)

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._settings_file, e)
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                logger.debug("Could not remove %s", temp_file)
            return False

        self._settings_cache = settings
        return True

    @staticmethod
    def _key_for(document_path: str) -> Optional[str]:
        try:
            return os.path.abspath(document_path)
        except (OSError, ValueError):
            logger.warning("Invalid document path: %s", document_path)
            return None

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Return a copy of the settings stored for ``document_path``."""
        if document_path is None:
            return {}
        key = self._key_for(document_path)
        if key is None:
            return {}

        doc_settings = self._load_all_settings().get(key, {})
        if not isinstance(doc_settings, dict):
            logger.warning("Settings for %s are not a dict, ignoring", key)
            return {}
        return doc_settings.copy()

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Replace the settings stored for ``document_path``."""
        if document_path is None:
            return False
        key = self._key_for(document_path)
        if key is None:
            return False

        all_settings = dict(self._load_all_settings())
        all_settings[key] = settings
        return self._save_all_settings(all_settings)

    @staticmethod
    def validate_setting(key: str, value: Any) -> bool:
        """Check the type of a known setting; unknown keys are accepted."""
        if value is None:
            return True
        if key == EditorConstants.CURSOR_POSITION_KEY:
            return (
                isinstance(value, (list, tuple))
                and len(value) == 2
                and all(isinstance(v, int) and not isinstance(v, bool) and v >= 0 for v in value)
            )
        return True

    def load_cursor_position(self, document_path: Optional[str]) -> Optional[Position]:
        value = self.load_settings(document_path).get(EditorConstants.CURSOR_POSITION_KEY)
        if value is None or not self.validate_setting(EditorConstants.CURSOR_POSITION_KEY, value):
            return None
        return Position.at(value[0], value[1])

    def save_cursor_position(self, document_path: Optional[str], position: Position) -> bool:
        settings = self.load_settings(document_path)
        settings[EditorConstants.CURSOR_POSITION_KEY] = [position.x, position.y]
        return self.save_settings(document_path, settings)

    def clear_cache(self) -> None:
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
