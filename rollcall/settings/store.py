"""Read-only settings store."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .models import RollSettings
from .defaults import DEFAULT_SETTINGS


logger = logging.getLogger(__name__)


class SettingsStore:
    """Loads session settings from a JSON file.

    The file is read once and cached; the returned RollSettings is frozen.
    Writing settings back belongs to the host, so there is no save().
    """

    def __init__(self, settings_path: Optional[Path] = None):
        """Initialize the settings store.

        Args:
            settings_path: Path to settings file. None means defaults only.
        """
        self._path = settings_path
        self._settings: Optional[RollSettings] = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def load(self) -> RollSettings:
        """Load settings from file, or return defaults.

        Returns:
            RollSettings instance
        """
        if self._settings is not None:
            return self._settings

        if self._path is not None and self._path.exists():
            try:
                with open(self._path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load settings from {self._path}: {e}")
                data = None

            if isinstance(data, dict):
                self._settings = self._validate(data)
            else:
                if data is not None:
                    logger.warning(f"Settings file {self._path} does not hold an object; using defaults")
                self._settings = DEFAULT_SETTINGS
        else:
            self._settings = DEFAULT_SETTINGS

        return self._settings

    def reload(self) -> RollSettings:
        """Force reload settings from disk, bypassing the cache.

        Returns:
            Fresh RollSettings from disk
        """
        self._settings = None  # Clear cache
        return self.load()     # Re-read from disk

    def _validate(self, data: Dict[str, Any]) -> RollSettings:
        """Validate raw settings, dropping fields that fail validation.

        A bad value (e.g. group_roll_result_mode = 7) is reported and
        replaced by its default instead of discarding the whole file.
        """
        try:
            return RollSettings.model_validate(data)
        except ValidationError as e:
            bad_fields = {err["loc"][0] for err in e.errors() if err.get("loc")}
            for name in sorted(str(f) for f in bad_fields):
                logger.warning(
                    f"Invalid setting '{name}'={data.get(name)!r}; using default "
                    f"{getattr(DEFAULT_SETTINGS, name, None)!r}"
                )
            cleaned = {k: v for k, v in data.items() if k not in bad_fields}
            try:
                return RollSettings.model_validate(cleaned)
            except ValidationError as e2:
                logger.warning(f"Settings still invalid after cleanup: {e2}")
                return DEFAULT_SETTINGS


# Global store instance
_store: Optional[SettingsStore] = None


def get_settings_store(settings_path: Optional[Path] = None) -> SettingsStore:
    """Get the global settings store instance."""
    global _store
    if _store is None:
        if settings_path is None:
            from ..config import Config
            settings_path = Config.get_settings_path()
        _store = SettingsStore(settings_path)
    return _store


def reset_settings_store():
    """Reset the global settings store (useful for testing)."""
    global _store
    _store = None
