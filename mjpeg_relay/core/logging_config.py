"""Root logging setup for the relay process.

The relay owns at most two handlers on the root logger: console output and
an optional rotating log file.  Only those handlers are ever replaced, so
handlers installed by an embedding application (or by pytest) survive a
reconfiguration.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3

# One access line per /mjpeg viewer and per uploaded frame drowns everything else.
QUIET_LOGGERS = ("aiohttp.access",)

_relay_handlers: List[logging.Handler] = []


def is_log_level(name: object) -> bool:
    return isinstance(name, str) and name.strip().lower() in LOG_LEVELS


def coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        if not is_log_level(level):
            raise ValueError(f"Unknown log level '{level}'")
        return getattr(logging, level.strip().upper())
    return int(level)


def _formatter() -> logging.Formatter:
    return logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)


def _file_handler(log_file: Union[str, Path]) -> RotatingFileHandler:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )


def reset_logging() -> None:
    """Detach and close the handlers installed by :func:`configure_logging`."""
    root = logging.getLogger()
    while _relay_handlers:
        handler = _relay_handlers.pop()
        root.removeHandler(handler)
        handler.close()


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> None:
    """Install the relay's console and file handlers at ``level``.

    Calling it again replaces the previous relay handlers, so the level or
    log file can change at runtime without duplicating output.
    """
    numeric_level = coerce_level(level)
    reset_logging()

    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        handlers.append(_file_handler(log_file))

    root = logging.getLogger()
    formatter = _formatter()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _relay_handlers.append(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = [
    "LOG_DATEFMT",
    "LOG_FORMAT",
    "LOG_LEVELS",
    "coerce_level",
    "configure_logging",
    "is_log_level",
    "reset_logging",
]
