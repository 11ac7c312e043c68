"""Tests for image intake and the pending request."""

import base64

import pytest

from aria.errors import InvalidImageInput, MissingPendingData
from aria.intake import (
    ImageSource,
    LocalFileImageReader,
    PendingRequest,
    normalize_image,
    strip_data_uri,
)
from tests.helpers import FakeImageReader


class TestNormalizeImage:
    @pytest.mark.asyncio
    async def test_raw_base64(self):
        assert await normalize_image("AAA=", FakeImageReader()) == "AAA="

    @pytest.mark.asyncio
    async def test_data_uri_prefix_stripped(self):
        result = await normalize_image("data:image/png;base64,AAA=", FakeImageReader())
        assert result == "AAA="

    @pytest.mark.asyncio
    async def test_inline_payload_wins_over_uri(self):
        reader = FakeImageReader()
        result = await normalize_image(ImageSource(uri="file:///x.jpg", base64="QkJC"), reader)

        assert result == "QkJC"
        assert reader.calls == []

    @pytest.mark.asyncio
    async def test_uri_read_through_reader(self):
        reader = FakeImageReader(payload="cmVhZA==")
        result = await normalize_image({"uri": "file:///photo.jpg", "base64": None}, reader)

        assert result == "cmVhZA=="
        assert reader.calls == ["file:///photo.jpg"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source", ["", "data:image/png;base64,", {}, ImageSource(), 42])
    async def test_unusable_source(self, source):
        with pytest.raises(InvalidImageInput):
            await normalize_image(source, FakeImageReader())

    @pytest.mark.asyncio
    async def test_unreadable_uri(self):
        with pytest.raises(InvalidImageInput):
            await normalize_image(ImageSource(uri="/missing.jpg"), FakeImageReader(fail=True))

    @pytest.mark.asyncio
    async def test_reader_returning_empty(self):
        with pytest.raises(InvalidImageInput):
            await normalize_image(ImageSource(uri="/empty.jpg"), FakeImageReader(payload=""))


def test_strip_data_uri_only_first_comma():
    assert strip_data_uri("data:text/plain,a,b") == "a,b"
    assert strip_data_uri("abc,def") == "abc,def"


class TestLocalFileImageReader:
    @pytest.mark.asyncio
    async def test_reads_plain_path(self, tmp_path):
        path = tmp_path / "frame.jpg"
        path.write_bytes(b"\xff\xd8\xff\xe0jpeg")

        result = await LocalFileImageReader().read_base64(str(path))

        assert base64.b64decode(result) == b"\xff\xd8\xff\xe0jpeg"

    @pytest.mark.asyncio
    async def test_reads_file_uri(self, tmp_path):
        path = tmp_path / "my frame.jpg"
        path.write_bytes(b"data")

        result = await LocalFileImageReader().read_base64(path.as_uri())

        assert result == base64.b64encode(b"data").decode()

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await LocalFileImageReader().read_base64(str(tmp_path / "nope.jpg"))


class TestPendingRequest:
    def test_consume_both_present(self):
        pending = PendingRequest(image="AAA=", prompt="hi")
        assert pending.consume() == ("AAA=", "hi")

    def test_missing_image(self):
        pending = PendingRequest(prompt="hi")
        with pytest.raises(MissingPendingData) as exc_info:
            pending.consume()

        assert exc_info.value.missing == "image"
        assert pending.prompt == "hi"

    def test_empty_prompt_counts_as_missing(self):
        pending = PendingRequest(image="AAA=", prompt="")
        with pytest.raises(MissingPendingData) as exc_info:
            pending.consume()

        assert exc_info.value.missing == "prompt"

    def test_reset(self):
        pending = PendingRequest(image="AAA=", prompt="hi")
        pending.reset()
        assert pending.image == ""
        assert pending.prompt == ""
