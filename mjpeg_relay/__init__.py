"""Supervised ffmpeg-to-MJPEG relay."""

from .relay import (
    CaptureConfig,
    CaptureSupervisor,
    IngestHandler,
    RelayConfig,
    RelayHub,
)
from .relay_system import RelaySystem

__version__ = "1.0.0"

__all__ = [
    "CaptureConfig",
    "CaptureSupervisor",
    "IngestHandler",
    "RelayConfig",
    "RelayHub",
    "RelaySystem",
    "__version__",
]
