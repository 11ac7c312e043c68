"""Speech-to-text gateways."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx

from aria.backends.base import TranscriptionGateway
from aria.common.logging import get_logger
from aria.config import OpenAIConfig


class OpenAITranscriptionGateway(TranscriptionGateway):
    """Transcribes recorded audio files with ``/audio/transcriptions``.

    Every failure (no API key, unreadable file, non-2xx status, bad JSON)
    collapses to an empty transcript.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        model: str = "gpt-4o-mini-transcribe",
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self.logger = get_logger("transcription_gateway", model=model)

    @classmethod
    def from_config(
        cls, config: OpenAIConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> OpenAITranscriptionGateway:
        return cls(
            config.endpoint,
            config.api_key,
            config.transcription_model,
            config.timeout_seconds,
            transport,
        )

    async def transcribe(self, audio_ref: str, media_type: str = "audio/m4a") -> str:
        if not self.api_key:
            self.logger.error("missing_api_key", hint="set ARIA_OPENAI_API_KEY or OPENAI_API_KEY")
            return ""

        path = Path(audio_ref)
        try:
            audio_bytes = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.logger.error("audio_read_failed", audio_ref=audio_ref, error=str(e))
            return ""

        self.logger.info("transcription_started", audio_ref=audio_ref, media_type=media_type)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.endpoint}/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    files={"file": (path.name or "audio.m4a", audio_bytes, media_type)},
                    data={"model": self.model},
                )

            if response.is_error:
                self.logger.error(
                    "transcription_failed",
                    status_code=response.status_code,
                    body=response.text,
                )
                return ""

            text = response.json().get("text") or ""
            if not isinstance(text, str):
                self.logger.error("transcription_error", error="unexpected text type")
                return ""
            self.logger.info("transcription_complete", text=text)
            return text

        except (httpx.HTTPError, ValueError, AttributeError) as e:
            self.logger.error("transcription_error", error=str(e))
            return ""


class MockTranscriptionGateway(TranscriptionGateway):
    """Mock gateway returning a fixed transcript."""

    def __init__(self, text: str = "What am I looking at?") -> None:
        self.text = text
        self.calls: list[tuple[str, str]] = []

    async def transcribe(self, audio_ref: str, media_type: str = "audio/m4a") -> str:
        self.calls.append((audio_ref, media_type))
        return self.text
