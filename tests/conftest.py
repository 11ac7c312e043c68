"""Pytest configuration and fixtures for Aria tests."""

from __future__ import annotations

from typing import Callable

import pytest

from aria.backends import (
    BackendVariant,
    ChatBackend,
    MockChatBackend,
    MockTranscriptionGateway,
    MockVisionDescriber,
)
from aria.config import Config
from aria.conversation import Session
from aria.orchestrator import ResponseOrchestrator
from tests.helpers import FakeImageReader


def pytest_configure(config: pytest.Config) -> None:
    """Configure test markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def config() -> Config:
    """Get test configuration."""
    cfg = Config()
    cfg.mock_mode = True
    cfg.device.mode = "development"
    cfg.device.log_level = "DEBUG"
    return cfg


@pytest.fixture
def image_reader() -> FakeImageReader:
    return FakeImageReader()


@pytest.fixture
def vision() -> MockVisionDescriber:
    return MockVisionDescriber(description='{"objects": [{"label": "red mug"}]}')


@pytest.fixture
def make_orchestrator(
    vision: MockVisionDescriber, image_reader: FakeImageReader
) -> Callable[..., ResponseOrchestrator]:
    """Build an orchestrator around scripted mock backends."""

    def _chat(variant: BackendVariant, reply: str | ChatBackend) -> ChatBackend:
        if isinstance(reply, str):
            return MockChatBackend(variant, replies=[reply])
        return reply

    def _make(
        classifier: str | ChatBackend = "v",
        non_agentic: str | ChatBackend = "That is a red mug.",
        agentic: str | ChatBackend = "I ordered a new one.",
        **overrides,
    ) -> ResponseOrchestrator:
        backends = {
            "fast": _chat(BackendVariant.FAST, classifier),
            "non_agentic": _chat(BackendVariant.NON_AGENTIC, non_agentic),
            "agentic": _chat(BackendVariant.AGENTIC, agentic),
            "vision": vision,
            "transcription": MockTranscriptionGateway(),
            "image_reader": image_reader,
            "session": Session("test-session-abc123"),
        }
        backends.update(overrides)
        return ResponseOrchestrator(**backends)

    return _make
