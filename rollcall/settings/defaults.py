"""Default settings."""

from .models import RollSettings


DEFAULT_SETTINGS = RollSettings()
