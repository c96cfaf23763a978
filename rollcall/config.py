"""Configuration management for Rollcall."""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
def _find_env_file() -> Path | None:
    """Find the .env file, searching up the directory tree."""
    current = Path(__file__).parent
    for _ in range(5):  # Search up to 5 levels
        env_path = current / ".env"
        if env_path.exists():
            return env_path
        current = current.parent
    return None


_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file)


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Config:
    """Application configuration from environment variables."""

    # Settings file (session-scoped, read-only once loaded)
    SETTINGS_PATH: str = os.getenv("ROLLCALL_SETTINGS_PATH", "")

    # Logging
    LOG_LEVEL: str = os.getenv("ROLLCALL_LOG_LEVEL", "INFO")

    # Debug
    DEBUG: bool = os.getenv("ROLLCALL_DEBUG", "false").lower() == "true"

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration, return list of issues."""
        issues = []

        if cls.LOG_LEVEL.upper() not in _LOG_LEVELS:
            issues.append(
                f"Unknown ROLLCALL_LOG_LEVEL '{cls.LOG_LEVEL}'. "
                f"Use one of: {', '.join(sorted(_LOG_LEVELS))}"
            )

        if cls.SETTINGS_PATH and not Path(cls.SETTINGS_PATH).exists():
            issues.append(
                f"ROLLCALL_SETTINGS_PATH points to a missing file: {cls.SETTINGS_PATH}"
            )

        return issues

    @classmethod
    def get_settings_path(cls) -> Path | None:
        """Get the settings file path, if one is configured."""
        return Path(cls.SETTINGS_PATH) if cls.SETTINGS_PATH else None

    @classmethod
    def get_log_level(cls) -> str:
        """Get the log level, forced to DEBUG when debug mode is on."""
        if cls.DEBUG:
            return "DEBUG"
        return cls.LOG_LEVEL.upper()

    @classmethod
    def is_debug(cls) -> bool:
        """Check if debug mode is enabled."""
        return cls.DEBUG


# Singleton config instance
config = Config()
