"""Chat completion backends (fast classifier, non-agentic and agentic responders)."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from aria.backends.base import BackendResult, BackendVariant, ChatBackend, Message
from aria.common.logging import get_logger
from aria.config import ASIConfig


class ASIChatBackend(ChatBackend):
    """ASI:One-compatible ``/chat/completions`` backend.

    Every call carries the session id as a correlation token. The fast and
    non-agentic models take it as a body field and have web search disabled;
    the agentic model takes it as a request header.
    """

    def __init__(
        self,
        variant: BackendVariant,
        model: str,
        session_id: str,
        endpoint: str,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.variant = variant
        self.model = model
        self.session_id = session_id
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self.logger = get_logger(f"chat_backend_{variant.value}", model=model)

    @classmethod
    def from_config(
        cls,
        variant: BackendVariant,
        config: ASIConfig,
        session_id: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ASIChatBackend:
        models = {
            BackendVariant.FAST: config.fast_model,
            BackendVariant.NON_AGENTIC: config.non_agentic_model,
            BackendVariant.AGENTIC: config.agentic_model,
        }
        return cls(
            variant,
            models[variant],
            session_id,
            config.endpoint,
            config.api_key,
            config.timeout_seconds,
            transport,
        )

    def build_request(self, messages: list[Message]) -> tuple[dict[str, str], dict[str, Any]]:
        """Build headers and JSON payload for one call."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
        }

        if self.variant is BackendVariant.AGENTIC:
            headers["x-session-id"] = self.session_id
            payload["stream"] = False
        else:
            payload["x-session-id"] = self.session_id
            payload["web_search"] = False

        return headers, payload

    async def complete(self, messages: list[Message]) -> BackendResult:
        """Send one non-streaming completion request."""
        start_time = time.time()

        if not self.api_key:
            # Not fatal: the request still goes out and the server decides
            self.logger.warning("missing_api_key", hint="set ARIA_ASI_API_KEY or ASI_ONE_API_KEY")

        headers, payload = self.build_request(messages)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.endpoint}/chat/completions",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
                result = response.json()

            choices = result.get("choices") or [{}]
            text = (choices[0].get("message") or {}).get("content") or ""
            latency_ms = int((time.time() - start_time) * 1000)
            if not isinstance(text, str):
                self.logger.warning(
                    "completion_failed",
                    error="unexpected content type",
                    content_type=type(text).__name__,
                    latency_ms=latency_ms,
                )
                return BackendResult.failure(
                    self.variant.value, "unexpected content type", latency_ms
                )
            self.logger.debug("completion_received", output_text=text, latency_ms=latency_ms)
            return BackendResult.success(text, latency_ms)

        except (
            httpx.HTTPError,
            ValueError,
            AttributeError,
            TypeError,
            KeyError,
            IndexError,
        ) as e:
            latency_ms = int((time.time() - start_time) * 1000)
            self.logger.warning("completion_failed", error=str(e), latency_ms=latency_ms)
            return BackendResult.failure(self.variant.value, str(e), latency_ms)


Responder = Callable[[list[Message]], str]


class MockChatBackend(ChatBackend):
    """Mock chat backend for development and tests.

    Replies come from ``replies`` (consumed in order, last one repeated), from
    a ``responder`` callable, or from a small keyword heuristic.
    """

    def __init__(
        self,
        variant: BackendVariant,
        replies: list[str] | None = None,
        responder: Responder | None = None,
        fail: bool = False,
    ) -> None:
        self.variant = variant
        self._replies = list(replies or [])
        self._responder = responder
        self._fail = fail
        self.calls: list[list[Message]] = []

    async def complete(self, messages: list[Message]) -> BackendResult:
        self.calls.append(list(messages))

        if self._fail:
            return BackendResult.failure(self.variant.value, "mock failure")
        if self._replies:
            reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
            return BackendResult.success(reply)
        if self._responder:
            return BackendResult.success(self._responder(messages))
        return BackendResult.success(self._default_reply(messages))

    def _default_reply(self, messages: list[Message]) -> str:
        prompt = messages[-1].content.lower() if messages else ""

        if self.variant is BackendVariant.FAST:
            wants_visual = any(w in prompt for w in ("see", "look", "this", "read"))
            wants_agent = any(w in prompt for w in ("book", "buy", "order", "search", "weather"))
            if wants_visual and wants_agent:
                return "b"
            if wants_visual:
                return "v"
            if wants_agent:
                return "a"
            return "I'm not sure, but I'm happy to help with that."

        if self.variant is BackendVariant.AGENTIC:
            return "<think>checking the agent network</think>I took care of that for you."
        return "You are looking at a desk with a laptop and a coffee cup."
