"""
Logging utilities for the asyncvoid application.

- Configure logging via `setup_logging(...)` at app startup.
- Get module-specific loggers via `get_logger(__name__)`.
- Reconfigure anytime by calling `setup_logging(...)` again.

This uses the *root logger* so NiceGUI/uvicorn records end up in the same place.
The log file lives in the per-user app directory (platformdirs, app name
"asyncvoid"), in a "logs" subfolder: e.g. asyncvoid.log.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

from platformdirs import user_config_dir

# Must match app_config.py.
_APP_NAME = "asyncvoid"
_LOG_FILENAME = "asyncvoid.log"

_LOG_FILE_PATH: Optional[Path] = None


def setup_logging(
    level: Union[str, int] = "DEBUG",
    log_file: Optional[Path] = None,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> None:
    """
    Configure root logging with console and rotating file handler.

    Console uses the given level; the file captures everything at DEBUG.
    Calling this multiple times will reconfigure logging (removes old handlers first).

    Parameters
    ----------
    level:
        Logging level for console (e.g. "DEBUG", "INFO").
    log_file:
        Optional explicit log file path. Defaults to the platformdirs config
        directory, "logs" subfolder.
    max_bytes:
        Max size in bytes for rotating log file.
    backup_count:
        Number of rotated log files to keep.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()

    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)

    root.setLevel(level)

    # Console: no timestamp
    console_fmt = "[%(levelname)s] %(name)s:%(funcName)s:%(lineno)d: %(message)s"
    file_fmt = "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=console_fmt))
    root.addHandler(console)

    global _LOG_FILE_PATH
    if log_file is None:
        log_file = Path(user_config_dir(_APP_NAME)) / "logs" / _LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    _LOG_FILE_PATH = log_file

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(fmt=file_fmt, datefmt=datefmt))
    root.addHandler(file_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'asyncvoid' logger.

    Use like:
        logger = get_logger(__name__)
        logger.info("Hello")
    """
    if name is None:
        name = "asyncvoid"
    return logging.getLogger(name)


def get_log_file_path() -> Optional[Path]:
    """
    Get the path to the log file, or None before `setup_logging` ran.

    Examples
    --------
    ```python
    log_path = get_log_file_path()
    if log_path:
        print(f"Logging to: {log_path}")
    ```
    """
    return _LOG_FILE_PATH
