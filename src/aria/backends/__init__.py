"""Remote backends used by the orchestrator."""

from aria.backends.base import (
    BackendResult,
    BackendVariant,
    ChatBackend,
    Message,
    TranscriptionGateway,
    VisionDescriber,
)
from aria.backends.chat import ASIChatBackend, MockChatBackend
from aria.backends.transcription import MockTranscriptionGateway, OpenAITranscriptionGateway
from aria.backends.vision import MockVisionDescriber, OpenAIVisionDescriber

__all__ = [
    "BackendResult",
    "BackendVariant",
    "ChatBackend",
    "Message",
    "TranscriptionGateway",
    "VisionDescriber",
    "ASIChatBackend",
    "MockChatBackend",
    "OpenAITranscriptionGateway",
    "MockTranscriptionGateway",
    "OpenAIVisionDescriber",
    "MockVisionDescriber",
]
