"""JPEG framing check and fallback frame loading.

Frames are opaque byte blobs.  The only validation performed is the weak
structural check on the start-of-image and end-of-image markers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import aiofiles

from mjpeg_relay.core.logging_utils import get_module_logger

logger = get_module_logger("Frames")

SOI_MARKER = b"\xff\xd8"
EOI_MARKER = b"\xff\xd9"


class RelayError(Exception):
    """Base class for errors raised by the relay core."""


class MalformedFrameError(RelayError, ValueError):
    """Uploaded bytes do not look like a JPEG image."""

    message = "Not JPEG format"

    def __init__(self, size: int) -> None:
        super().__init__(f"{self.message} ({size} bytes)")
        self.size = size


def is_jpeg(data: Optional[bytes]) -> bool:
    if not data or len(data) < len(SOI_MARKER) + len(EOI_MARKER):
        return False
    return data.startswith(SOI_MARKER) and data.endswith(EOI_MARKER)


def ensure_jpeg(data: Optional[bytes]) -> bytes:
    """Return ``data`` as immutable bytes, or raise :class:`MalformedFrameError`."""
    if not is_jpeg(data):
        raise MalformedFrameError(len(data or b""))
    return bytes(data)


async def load_fallback_frame(path: Union[str, Path, None]) -> Optional[bytes]:
    """Read the fallback image if it exists; a missing file means no fallback."""
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        logger.info("No fallback image at %s", path)
        return None

    async with aiofiles.open(path, "rb") as fh:
        data = await fh.read()

    if not is_jpeg(data):
        logger.warning("Fallback image %s lacks JPEG markers; serving it anyway", path)
    logger.info("Loaded fallback image %s (%d bytes)", path, len(data))
    return data


__all__ = [
    "EOI_MARKER",
    "MalformedFrameError",
    "RelayError",
    "SOI_MARKER",
    "ensure_jpeg",
    "is_jpeg",
    "load_fallback_frame",
]
