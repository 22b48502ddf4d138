"""Tests for JPEG marker validation and fallback loading."""

import pytest

from mjpeg_relay.relay.frames import (
    MalformedFrameError,
    RelayError,
    ensure_jpeg,
    is_jpeg,
    load_fallback_frame,
)
from tests.infrastructure.helpers import make_jpeg


class TestIsJpeg:

    def test_accepts_marked_frame(self):
        assert is_jpeg(make_jpeg(100))

    def test_minimal_frame_is_just_the_markers(self):
        assert is_jpeg(b"\xff\xd8\xff\xd9")

    @pytest.mark.parametrize("data", [
        None,
        b"",
        b"\xff\xd8",
        b"\xff\xd8\xff",
        b"not a jpeg at all",
        b"\xff\xd8" + b"x" * 20,
        b"x" * 20 + b"\xff\xd9",
    ])
    def test_rejects_unmarked_data(self, data):
        assert not is_jpeg(data)


class TestEnsureJpeg:

    def test_returns_immutable_bytes(self):
        frame = make_jpeg(32)
        result = ensure_jpeg(bytearray(frame))
        assert isinstance(result, bytes)
        assert result == frame

    def test_raises_with_size(self):
        with pytest.raises(MalformedFrameError) as excinfo:
            ensure_jpeg(b"garbage!")
        assert excinfo.value.size == 8
        assert excinfo.value.message == "Not JPEG format"
        assert isinstance(excinfo.value, RelayError)
        assert isinstance(excinfo.value, ValueError)


class TestLoadFallbackFrame:

    @pytest.mark.asyncio
    async def test_reads_existing_file(self, fallback_file):
        data = await load_fallback_frame(fallback_file)
        assert data == fallback_file.read_bytes()

    @pytest.mark.asyncio
    async def test_missing_file_means_no_fallback(self, tmp_path):
        assert await load_fallback_frame(tmp_path / "missing.jpg") is None

    @pytest.mark.asyncio
    async def test_none_path(self):
        assert await load_fallback_frame(None) is None

    @pytest.mark.asyncio
    async def test_unmarked_file_is_still_served(self, tmp_path):
        path = tmp_path / "odd.jpg"
        path.write_bytes(b"plain bytes")
        assert await load_fallback_frame(path) == b"plain bytes"
