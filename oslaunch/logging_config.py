"""
Centralized logging configuration for oslaunch.

Every module obtains its logger through ``get_logger(__name__)``. Importing
the library never touches the root logger; the process that owns it (the
``oslaunch`` command) calls ``setup_logging()``, after which a rotating log
file under the user cache directory receives INFO and above, stderr only
warnings and errors.

Usage:
    from oslaunch.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Started file manager")
    logger.warning("Variable has no value")
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from oslaunch.config import LOGGING, PATHS

# Global flag to track if logging is initialized
_logging_initialized = False


def default_log_file() -> Path:
    """
    Return the default log file location.

    ``OSLAUNCH_LOG_DIR`` takes precedence; otherwise the per-user cache
    directory is used (``%LOCALAPPDATA%`` on Windows, ``~/Library/Caches`` on
    macOS, ``$XDG_CACHE_HOME`` or ``~/.cache`` elsewhere).
    """
    override = os.environ.get(LOGGING.LOG_DIR_ENV)
    if override:
        return Path(override).expanduser() / PATHS.LOG_FILE_NAME

    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Caches"
    else:
        base = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))

    return base / PATHS.APP_DIR_NAME / PATHS.LOGS_DIR_NAME / PATHS.LOG_FILE_NAME


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    max_bytes: int = LOGGING.MAX_BYTES,
    backup_count: int = LOGGING.BACKUP_COUNT,
    console_level: str = LOGGING.CONSOLE_LEVEL,
) -> None:
    """
    Install the rotating file handler and the stderr handler on the root logger.

    Only the first call has an effect; use reset_logging() to start over.

    Args:
        log_level: File handler level; ``OSLAUNCH_LOG_LEVEL`` or INFO when omitted
        log_file: Log file location; ``default_log_file()`` when omitted
        max_bytes: Rotation threshold in bytes
        backup_count: Rotated files kept next to the active one
        console_level: Stderr handler level
    """
    global _logging_initialized

    if _logging_initialized:
        return

    if log_level is None:
        log_level = os.environ.get(LOGGING.LOG_LEVEL_ENV, LOGGING.FILE_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter in handlers
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter(fmt="%(levelname)s: %(message)s")

    log_file = Path(log_file) if log_file is not None else default_log_file()

    # File handler - skipped when the log directory is not writable
    file_handler = None
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError as exc:
        file_error = str(exc)
    else:
        file_error = None
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    # Console handler - warnings and errors only by default
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, console_level.upper()))
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    _logging_initialized = True

    if file_handler is None:
        root_logger.warning(f"File logging disabled, cannot open {log_file}: {file_error}")
    else:
        root_logger.info(
            f"Logging initialized: file={log_file} (level={log_level}), "
            f"console (level={console_level})"
        )


def get_logger(name: str) -> logging.Logger:
    """Return the named logger. Handlers are left to ``setup_logging()``."""
    return logging.getLogger(name)


def reset_logging() -> None:
    """Close and detach every root handler so setup_logging() runs again (tests)."""
    global _logging_initialized

    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(logging.WARNING)
    _logging_initialized = False
