"""
Centralized configuration for oslaunch.

This module provides configuration constants for logging, filesystem locations
and the launch pipeline. Nothing here is persisted; user preferences are owned
by whatever host calls into the library.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoggingConfig:
    """Logging defaults."""

    MAX_BYTES: int = 10_485_760  # 10MB
    BACKUP_COUNT: int = 5
    FILE_LEVEL: str = "INFO"
    CONSOLE_LEVEL: str = "WARNING"

    # Environment overrides
    LOG_DIR_ENV: str = "OSLAUNCH_LOG_DIR"
    LOG_LEVEL_ENV: str = "OSLAUNCH_LOG_LEVEL"


@dataclass(frozen=True)
class PathsConfig:
    """Directory and file names."""

    APP_DIR_NAME: str = "oslaunch"
    LOGS_DIR_NAME: str = "logs"
    LOG_FILE_NAME: str = "oslaunch.log"


@dataclass(frozen=True)
class LaunchConfig:
    """Launch pipeline constants."""

    VAR_BEGIN: str = "${"
    VAR_END: str = "}"
    TARGET_PLACEHOLDER: str = "{target}"
    ENV_VAR_PREFIX: str = "env_var:"

    # Temporary files for commands that receive the selected text
    TEMP_FILE_PREFIX: str = "oslaunch-selection-"
    TEMP_FILE_SUFFIX: str = ".txt"
    TEMP_FILE_ENCODING: str = "utf-8"


# Global configuration instances (frozen/immutable)
LOGGING = LoggingConfig()
PATHS = PathsConfig()
LAUNCH = LaunchConfig()
