"""Settings package for Rollcall."""

from .models import RollSettings
from .store import SettingsStore, get_settings_store, reset_settings_store
from .defaults import DEFAULT_SETTINGS

__all__ = [
    "RollSettings",
    "SettingsStore",
    "get_settings_store",
    "reset_settings_store",
    "DEFAULT_SETTINGS",
]
