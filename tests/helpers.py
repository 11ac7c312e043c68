"""Test doubles shared across the test suite."""

from __future__ import annotations

import asyncio

from aria.backends import BackendResult, BackendVariant, ChatBackend, Message

# "JPEG" base64-encoded, stands in for a captured frame
IMAGE_B64 = "SlBFRw=="


class FakeImageReader:
    """Image reader that returns a fixed payload instead of touching disk."""

    def __init__(self, payload: str = "cmVhZA==", fail: bool = False) -> None:
        self.payload = payload
        self.fail = fail
        self.calls: list[str] = []

    async def read_base64(self, uri: str) -> str:
        self.calls.append(uri)
        if self.fail:
            raise FileNotFoundError(uri)
        return self.payload


class RaisingChatBackend(ChatBackend):
    """Backend whose implementation blows up instead of returning a failure."""

    def __init__(self, variant: BackendVariant) -> None:
        self.variant = variant
        self.calls: list[list[Message]] = []

    async def complete(self, messages: list[Message]) -> BackendResult:
        self.calls.append(messages)
        raise RuntimeError("connection reset")


class GatedChatBackend(ChatBackend):
    """Backend that waits for ``release`` before answering."""

    def __init__(self, variant: BackendVariant, reply: str) -> None:
        self.variant = variant
        self.reply = reply
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls: list[list[Message]] = []

    async def complete(self, messages: list[Message]) -> BackendResult:
        self.calls.append(messages)
        self.started.set()
        await self.release.wait()
        return BackendResult.success(self.reply)
