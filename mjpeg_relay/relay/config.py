"""Typed configuration for the relay and its capture process."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from mjpeg_relay.core.config_manager import ConfigManager, get_config_manager
from mjpeg_relay.core.logging_config import is_log_level
from mjpeg_relay.core.paths import DEFAULT_FALLBACK_IMAGE


# ---------------------------------------------------------------------------
# Type coercion helpers for values read from config files
# ---------------------------------------------------------------------------


def get_pref_str(prefs: Mapping[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    val = prefs.get(key)
    if val is None:
        return default
    text = str(val).strip()
    return text if text else default


def get_pref_int(prefs: Mapping[str, Any], key: str, default: int) -> int:
    val = prefs.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except (ValueError, TypeError):
        return default


def get_pref_float(prefs: Mapping[str, Any], key: str, default: float) -> float:
    val = prefs.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except (ValueError, TypeError):
        return default


def get_pref_log_level(prefs: Mapping[str, Any], key: str, default: str) -> str:
    val = get_pref_str(prefs, key, None)
    if val is None or not is_log_level(val):
        return default
    return val.lower()


def get_pref_path(prefs: Mapping[str, Any], key: str, default: Optional[Path]) -> Optional[Path]:
    val = prefs.get(key)
    if val is None:
        return default
    text = str(val).strip()
    return Path(text).expanduser() if text else default


@dataclass(slots=True)
class CaptureConfig:
    """Inputs to the ffmpeg command line; see ``build_ffmpeg_args``."""

    ffmpeg_path: str = "ffmpeg"
    input: str = "/dev/video0"
    output: Optional[str] = None
    fps: Optional[str] = None
    bitrate: Optional[str] = None
    resolution: Optional[str] = None
    filters: Optional[str] = None
    format: Optional[str] = "image2"
    input_format: Optional[str] = "mjpeg"
    restart_delay: float = 5.0

    @classmethod
    def from_preferences(cls, prefs: Mapping[str, Any]) -> "CaptureConfig":
        defaults = cls()
        return cls(
            ffmpeg_path=get_pref_str(prefs, "ffmpeg_path", defaults.ffmpeg_path),
            input=get_pref_str(prefs, "input", defaults.input),
            output=get_pref_str(prefs, "output", defaults.output),
            fps=get_pref_str(prefs, "fps", defaults.fps),
            bitrate=get_pref_str(prefs, "bitrate", defaults.bitrate),
            resolution=get_pref_str(prefs, "resolution", defaults.resolution),
            filters=get_pref_str(prefs, "filters", defaults.filters),
            format=get_pref_str(prefs, "format", defaults.format),
            input_format=get_pref_str(prefs, "input_format", defaults.input_format),
            restart_delay=get_pref_float(prefs, "restart_delay", defaults.restart_delay),
        )

    def output_url(self, port: int) -> str:
        return self.output or f"http://localhost:{port}/mjpeg"


@dataclass(slots=True)
class RelayConfig:
    """Typed configuration for the relay process."""

    host: str = "0.0.0.0"
    port: int = 1234
    fallback_image: Optional[Path] = DEFAULT_FALLBACK_IMAGE
    watchdog_interval: float = 10.0
    log_level: str = "info"
    log_file: Optional[Path] = None
    capture: CaptureConfig = field(default_factory=CaptureConfig)

    @classmethod
    def from_preferences(cls, prefs: Mapping[str, Any], args: Any = None) -> "RelayConfig":
        """Build config from parsed ``key = value`` pairs with optional CLI overrides."""
        defaults = cls()

        config = cls(
            host=get_pref_str(prefs, "host", defaults.host),
            port=get_pref_int(prefs, "port", defaults.port),
            fallback_image=get_pref_path(prefs, "fallback_image", defaults.fallback_image),
            watchdog_interval=get_pref_float(prefs, "watchdog_interval", defaults.watchdog_interval),
            log_level=get_pref_log_level(prefs, "log_level", defaults.log_level),
            log_file=get_pref_path(prefs, "log_file", defaults.log_file),
            capture=CaptureConfig.from_preferences(prefs),
        )

        if args is not None:
            config = config._apply_args_override(args)

        return config

    @classmethod
    def from_file(
        cls,
        config_path: Optional[Path],
        args: Any = None,
        *,
        config_manager: Optional[ConfigManager] = None,
    ) -> "RelayConfig":
        prefs: dict[str, str] = {}
        if config_path is not None:
            prefs = (config_manager or get_config_manager()).read_config(Path(config_path))
        return cls.from_preferences(prefs, args)

    def _apply_args_override(self, args: Any) -> "RelayConfig":
        """Apply CLI argument overrides to config values."""
        relay_mappings = {
            "host": "host",
            "port": "port",
            "fallback_image": "fallback_image",
            "watchdog_interval": "watchdog_interval",
            "log_level": "log_level",
            "log_file": "log_file",
        }
        capture_mappings = {
            "ffmpeg": "ffmpeg_path",
            "input": "input",
            "output": "output",
            "fps": "fps",
            "bitrate": "bitrate",
            "resolution": "resolution",
            "filters": "filters",
            "format": "format",
            "input_format": "input_format",
            "restart_delay": "restart_delay",
        }

        relay_values = {}
        for arg_name, config_key in relay_mappings.items():
            val = getattr(args, arg_name, None)
            if val is not None:
                relay_values[config_key] = val

        capture_values = {}
        for arg_name, config_key in capture_mappings.items():
            val = getattr(args, arg_name, None)
            if val is not None:
                capture_values[config_key] = val

        return replace(self, capture=replace(self.capture, **capture_values), **relay_values)

    def to_dict(self) -> dict[str, Any]:
        """Export config values as dictionary."""
        return asdict(self)
