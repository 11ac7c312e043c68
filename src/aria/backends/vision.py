"""Image description backends."""

from __future__ import annotations

import time
from typing import Any

import httpx

from aria.backends.base import BackendResult, VisionDescriber
from aria.common.logging import get_logger
from aria.config import OpenAIConfig
from aria.prompts import VISION_INSTRUCTION


def extract_output_text(result: dict[str, Any]) -> str:
    """Collect the text parts of a ``/responses`` payload."""
    if isinstance(result.get("output_text"), str):
        return result["output_text"]

    parts: list[str] = []
    for item in result.get("output") or []:
        for content in item.get("content") or []:
            if content.get("type") == "output_text" and isinstance(content.get("text"), str):
                parts.append(content["text"])
    return "".join(parts)


class OpenAIVisionDescriber(VisionDescriber):
    """Describes images with an OpenAI-compatible ``/responses`` endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        model: str = "gpt-4.1-mini",
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self.logger = get_logger("vision_describer", model=model)

    @classmethod
    def from_config(
        cls, config: OpenAIConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> OpenAIVisionDescriber:
        return cls(
            config.endpoint,
            config.api_key,
            config.vision_model,
            config.timeout_seconds,
            transport,
        )

    def build_payload(self, image_base64: str) -> dict[str, Any]:
        content: list[dict[str, str]] = [{"type": "input_text", "text": VISION_INSTRUCTION}]
        if image_base64:
            content.append(
                {
                    "type": "input_image",
                    "image_url": f"data:image/jpeg;base64,{image_base64}",
                }
            )
        return {"model": self.model, "input": [{"role": "user", "content": content}]}

    async def describe(self, image_base64: str) -> BackendResult:
        """Ask the model for a structured description of the image."""
        start_time = time.time()
        self.logger.debug("describing_image", image_length=len(image_base64))

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        else:
            self.logger.warning("missing_api_key", hint="set ARIA_OPENAI_API_KEY or OPENAI_API_KEY")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.endpoint}/responses",
                    headers=headers,
                    json=self.build_payload(image_base64),
                )
                response.raise_for_status()
                text = extract_output_text(response.json())

            latency_ms = int((time.time() - start_time) * 1000)
            self.logger.debug("visual_info_received", output_text=text, latency_ms=latency_ms)
            return BackendResult.success(text, latency_ms)

        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            latency_ms = int((time.time() - start_time) * 1000)
            self.logger.warning("describe_failed", error=str(e), latency_ms=latency_ms)
            return BackendResult.failure("vision", str(e), latency_ms)


class MockVisionDescriber(VisionDescriber):
    """Mock describer for development and tests."""

    def __init__(self, description: str | None = None, fail: bool = False) -> None:
        self.description = description or (
            '{"objects": [{"label": "laptop", "position": "center"}, '
            '{"label": "coffee cup", "position": "right"}], "text": []}'
        )
        self.fail = fail
        self.calls: list[str] = []

    async def describe(self, image_base64: str) -> BackendResult:
        self.calls.append(image_base64)
        if self.fail:
            return BackendResult.failure("vision", "mock failure")
        return BackendResult.success(self.description)
