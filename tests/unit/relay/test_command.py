"""Tests for ffmpeg command construction."""

from mjpeg_relay.relay.command import build_ffmpeg_args, build_ffmpeg_command
from mjpeg_relay.relay.config import CaptureConfig


def test_default_command():
    args = build_ffmpeg_args(CaptureConfig(), 1234)
    assert args == [
        "-y",
        "-input_format", "mjpeg",
        "-i", "/dev/video0",
        "-an",
        "-update", "1",
        "-f", "image2",
        "http://localhost:1234/mjpeg",
    ]


def test_all_options():
    config = CaptureConfig(
        input="/dev/video2",
        fps="15",
        bitrate="2M",
        resolution="1280x720",
        filters="brightness=0.1:contrast=1.2",
        format="mpjpeg",
        input_format="yuyv422",
    )
    assert build_ffmpeg_args(config, 8080) == [
        "-y",
        "-input_format", "yuyv422",
        "-i", "/dev/video2",
        "-an",
        "-r", "15",
        "-s", "1280x720",
        "-vf", "eq=brightness=0.1:contrast=1.2",
        "-update", "1",
        "-f", "mpjpeg",
        "-b:v", "2M",
        "http://localhost:8080/mjpeg",
    ]


def test_unset_formats_are_omitted():
    config = CaptureConfig(format=None, input_format=None)
    args = build_ffmpeg_args(config, 1234)
    assert "-f" not in args
    assert "-input_format" not in args


def test_explicit_output_overrides_local_endpoint():
    config = CaptureConfig(output="http://relay.example:9000/mjpeg")
    assert build_ffmpeg_args(config, 1234)[-1] == "http://relay.example:9000/mjpeg"


def test_command_prepends_executable():
    config = CaptureConfig(ffmpeg_path="/opt/ffmpeg/bin/ffmpeg")
    command = build_ffmpeg_command(config, 1234)
    assert command[0] == "/opt/ffmpeg/bin/ffmpeg"
    assert command[1:] == build_ffmpeg_args(config, 1234)
