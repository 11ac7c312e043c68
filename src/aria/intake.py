"""Pending request intake: image normalization and the single-slot request."""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

from aria.common.logging import get_logger
from aria.errors import InvalidImageInput, MissingPendingData

logger = get_logger("intake")


@dataclass
class ImageSource:
    """A reference to an image plus an optional inline base64 payload."""

    uri: str | None = None
    base64: str | None = None


class ImageReader(Protocol):
    """Reads an image reference and returns its bytes base64-encoded."""

    async def read_base64(self, uri: str) -> str: ...


class LocalFileImageReader:
    """Reads images from the local filesystem (plain paths or ``file://`` URIs)."""

    async def read_base64(self, uri: str) -> str:
        path = _uri_to_path(uri)
        data = await asyncio.to_thread(path.read_bytes)
        return base64.b64encode(data).decode("ascii")


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def strip_data_uri(value: str) -> str:
    """Drop a ``data:...,`` prefix, returning the bare payload."""
    if value.startswith("data:"):
        _, _, payload = value.partition(",")
        return payload
    return value


async def normalize_image(source: Any, reader: ImageReader) -> str:
    """Turn any supported image source into a base64 string.

    Args:
        source: Base64 string, data-URI string, ``ImageSource`` or a mapping
            with ``uri`` / ``base64`` keys.
        reader: Collaborator used when only a reference is given.

    Returns:
        Non-empty base64 payload.

    Raises:
        InvalidImageInput: No usable content could be produced.
    """
    if isinstance(source, Mapping):
        source = ImageSource(uri=source.get("uri"), base64=source.get("base64"))

    encoded: str | None = None
    if isinstance(source, str):
        encoded = strip_data_uri(source)
    elif isinstance(source, ImageSource):
        if source.base64:
            encoded = source.base64
        elif source.uri:
            try:
                encoded = await reader.read_base64(source.uri)
            except Exception as e:
                logger.error("image_read_failed", uri=source.uri, error=str(e))

    if not encoded:
        raise InvalidImageInput(
            "Unsupported image input; expected base64 string or {uri | base64}."
        )
    return encoded


@dataclass
class PendingRequest:
    """At most one pending image and one pending prompt.

    Submitting again before ``consume`` overwrites the previous value.
    """

    image: str = ""
    prompt: str = ""

    def consume(self) -> tuple[str, str]:
        """Return ``(image, prompt)`` if both are set.

        Raises:
            MissingPendingData: Image or prompt is empty. Fields are kept.
        """
        if not self.image:
            raise MissingPendingData("No image has been captured.", missing="image")
        if not self.prompt:
            raise MissingPendingData("No prompt has been recorded.", missing="prompt")
        return self.image, self.prompt

    def reset(self) -> None:
        self.image = ""
        self.prompt = ""
