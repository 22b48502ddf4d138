"""Centralized path constants for the relay."""

from __future__ import annotations

import os
from pathlib import Path

# Default locations, relative to the working directory.
CONFIG_PATH = Path("relay.conf")
DEFAULT_FALLBACK_IMAGE = Path("default.jpg")

# User-specific state (allows running from read-only install directories)
_USER_STATE_ENV = os.environ.get("MJPEG_RELAY_STATE_DIR")
USER_STATE_DIR = Path(_USER_STATE_ENV).expanduser() if _USER_STATE_ENV else (Path.home() / ".mjpeg_relay")
USER_CONFIG_OVERRIDES_DIR = USER_STATE_DIR / "config_overrides"


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_FALLBACK_IMAGE",
    "USER_STATE_DIR",
    "USER_CONFIG_OVERRIDES_DIR",
]
