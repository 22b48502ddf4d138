"""Frame broadcast engine: store, registry, fan-out, watchdog and capture supervision."""

from .broadcaster import BOUNDARY, CONTENT_TYPE, Broadcaster, format_chunk
from .client_registry import Client, ClientRegistry, FrameChannel
from .command import build_ffmpeg_args, build_ffmpeg_command
from .config import CaptureConfig, RelayConfig
from .frame_store import FrameStore
from .frames import MalformedFrameError, RelayError, ensure_jpeg, is_jpeg, load_fallback_frame
from .hub import RelayHub
from .ingest import IngestHandler, IngestResult
from .supervisor import CaptureState, CaptureSupervisor
from .watchdog import FrameWatchdog, WatchdogState

__all__ = [
    "BOUNDARY",
    "CONTENT_TYPE",
    "Broadcaster",
    "CaptureConfig",
    "CaptureState",
    "CaptureSupervisor",
    "Client",
    "ClientRegistry",
    "FrameChannel",
    "FrameStore",
    "FrameWatchdog",
    "IngestHandler",
    "IngestResult",
    "MalformedFrameError",
    "RelayConfig",
    "RelayError",
    "RelayHub",
    "WatchdogState",
    "build_ffmpeg_args",
    "build_ffmpeg_command",
    "ensure_jpeg",
    "format_chunk",
    "is_jpeg",
    "load_fallback_frame",
]
