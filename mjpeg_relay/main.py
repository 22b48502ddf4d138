"""Command-line entrypoint for the MJPEG relay."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys
from pathlib import Path
from typing import Optional

from mjpeg_relay.core.logging_config import LOG_LEVELS, configure_logging
from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.core.paths import CONFIG_PATH
from mjpeg_relay.relay.config import RelayConfig
from mjpeg_relay.relay_system import RelaySystem

logger = get_module_logger("Main")


def positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return number


def port_number(value: str) -> int:
    number = int(value)
    if not 0 < number < 65536:
        raise argparse.ArgumentTypeError(f"invalid port {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mjpeg-relay",
        description="Relay an ffmpeg JPEG stream to any number of MJPEG viewers",
    )
    # Every option defaults to None so unset flags never mask config-file values.
    parser.add_argument("--config", type=Path, default=None,
                        help=f"key = value config file (default: ./{CONFIG_PATH} if present)")

    server = parser.add_argument_group("server")
    server.add_argument("--host", default=None, help="Interface to bind (default 0.0.0.0)")
    server.add_argument("--port", type=port_number, default=None, help="HTTP port (default 1234)")
    server.add_argument("--fallback-image", type=Path, default=None,
                        help="JPEG shown while no live frame is available (default ./default.jpg)")
    server.add_argument("--watchdog-interval", type=positive_float, default=None,
                        help="Seconds without frames before each warning (default 10)")

    capture = parser.add_argument_group("capture")
    capture.add_argument("--ffmpeg", default=None, help="ffmpeg executable (default: ffmpeg)")
    capture.add_argument("-i", "--input", default=None, help="Capture input (default /dev/video0)")
    capture.add_argument("-o", "--output", default=None,
                         help="Where ffmpeg posts frames (default http://localhost:<port>/mjpeg)")
    capture.add_argument("--fps", "--framerate", dest="fps", default=None, help="Output frame rate")
    capture.add_argument("--bitrate", default=None, help="Video bitrate, e.g. 2M")
    capture.add_argument("--res", "--resolution", dest="resolution", default=None, help="Frame size, e.g. 1280x720")
    capture.add_argument("--filters", default=None, help="Arguments for ffmpeg's eq filter")
    capture.add_argument("--format", default=None, help="Output container format (default image2)")
    capture.add_argument("--input-format", "--iformat", dest="input_format", default=None,
                         help="Input pixel/stream format (default mjpeg)")
    capture.add_argument("--restart-delay", type=positive_float, default=None,
                         help="Seconds to wait before restarting ffmpeg (default 5)")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Logging verbosity")
    logging_group.add_argument("--log-file", type=Path, default=None, help="Optional rotating log file")

    return parser


def load_config(args: argparse.Namespace) -> RelayConfig:
    config_path = args.config
    if config_path is None and CONFIG_PATH.exists():
        config_path = CONFIG_PATH
    return RelayConfig.from_file(config_path, args)


async def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args)

    configure_logging(config.log_level, log_file=config.log_file)
    logger.info("Starting with args '%s'", " ".join(argv if argv is not None else sys.argv[1:]))

    system = RelaySystem(config)
    try:
        await system.start()
    except OSError as exc:
        logger.error("Failed to start relay: %s", exc)
        await system.stop()
        return 1

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, system.request_shutdown)

    await system.wait_stopped()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted")


if __name__ == "__main__":
    run()
