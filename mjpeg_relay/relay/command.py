"""Mapping from :class:`CaptureConfig` to the ffmpeg invocation."""

from __future__ import annotations

from typing import List

from .config import CaptureConfig


def build_ffmpeg_args(config: CaptureConfig, port: int) -> List[str]:
    """Return ffmpeg arguments (without the executable) for ``config``.

    ffmpeg reads ``config.input`` and, with ``-update 1``, POSTs every
    encoded frame to the relay's ``/mjpeg`` endpoint.
    """
    args = ["-y"]
    if config.input_format:
        args += ["-input_format", config.input_format]
    args += ["-i", config.input, "-an"]
    if config.fps:
        args += ["-r", str(config.fps)]
    if config.resolution:
        args += ["-s", config.resolution]
    if config.filters:
        args += ["-vf", f"eq={config.filters}"]
    args += ["-update", "1"]
    if config.format:
        args += ["-f", config.format]
    if config.bitrate:
        args += ["-b:v", str(config.bitrate)]
    args.append(config.output_url(port))
    return args


def build_ffmpeg_command(config: CaptureConfig, port: int) -> List[str]:
    return [config.ffmpeg_path, *build_ffmpeg_args(config, port)]
