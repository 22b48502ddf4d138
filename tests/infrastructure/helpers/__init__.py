"""Test helpers for building frames and reading multipart output.

Usage:
    from tests.infrastructure.helpers import make_jpeg, parse_multipart

    frame = make_jpeg(100)
    frames = parse_multipart(channel.received)
"""

from .frames import make_jpeg, parse_multipart, wait_until

__all__ = ["make_jpeg", "parse_multipart", "wait_until"]
