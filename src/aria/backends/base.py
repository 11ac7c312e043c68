"""Shared types for the remote backends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aria.errors import BackendUnavailable


class BackendVariant(str, Enum):
    """Which chat backend a call goes to."""

    FAST = "fast"
    NON_AGENTIC = "nonAgentic"
    AGENTIC = "agentic"


@dataclass
class Message:
    """Chat message."""

    role: str  # "system", "user", "assistant"
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class BackendResult:
    """Outcome of one backend call: text on success, the fault otherwise."""

    text: str = ""
    error: BackendUnavailable | None = None
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str, latency_ms: int = 0) -> BackendResult:
        return cls(text=text, latency_ms=latency_ms)

    @classmethod
    def failure(cls, backend: str, reason: str, latency_ms: int = 0) -> BackendResult:
        return cls(error=BackendUnavailable(reason, backend=backend), latency_ms=latency_ms)

    def text_or_empty(self) -> str:
        """Collapse to the public contract: text, or ``""`` on failure."""
        return self.text if self.ok else ""


class ChatBackend:
    """Abstract chat completion backend."""

    variant: BackendVariant

    async def complete(self, messages: list[Message]) -> BackendResult:
        """Return a single completion for the message sequence."""
        raise NotImplementedError


class VisionDescriber:
    """Abstract image describer."""

    async def describe(self, image_base64: str) -> BackendResult:
        """Describe the scene in a base64-encoded image."""
        raise NotImplementedError


class TranscriptionGateway:
    """Abstract speech-to-text gateway."""

    async def transcribe(self, audio_ref: str, media_type: str = "audio/m4a") -> str:
        """Return the transcript, or ``""`` on any failure."""
        raise NotImplementedError
