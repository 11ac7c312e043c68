"""Response orchestrator: classify a query, dispatch it, log the exchange."""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx

from aria import prompts
from aria.backends.base import (
    BackendVariant,
    ChatBackend,
    Message,
    TranscriptionGateway,
    VisionDescriber,
)
from aria.backends.chat import ASIChatBackend, MockChatBackend
from aria.backends.transcription import MockTranscriptionGateway, OpenAITranscriptionGateway
from aria.backends.vision import MockVisionDescriber, OpenAIVisionDescriber
from aria.common.logging import get_logger
from aria.config import Config, load_config
from aria.conversation import ConversationLog, Session, TurnRole
from aria.errors import MissingPendingData
from aria.intake import ImageReader, LocalFileImageReader, PendingRequest, normalize_image
from aria.routing import Classification, Route, parse_classification, strip_reasoning

NOT_AVAILABLE = "not available"

MISSING_IMAGE_MESSAGE = "Problem with prompt and Image input: no image was captured."
MISSING_PROMPT_MESSAGE = "Problem with prompt and Image input: no prompt was recorded."
COMPUTE_FAILED_MESSAGE = "Failed to compute response."
EMPTY_ANSWER_MESSAGE = "Sorry, I couldn't come up with an answer. Please try again."
BUSY_MESSAGE = "Still working on the previous request. Please wait."


class OrchestratorState(Enum):
    """Where the orchestrator is in answering a request."""

    IDLE = "idle"
    CLASSIFYING = "classifying"
    DIRECT_ANSWER = "direct_answer"
    VISUAL_ONLY = "visual_only"
    AGENTIC_ONLY = "agentic_only"
    VISUAL_AND_AGENTIC = "visual_and_agentic"
    LOGGED = "logged"


_BRANCH_STATES = {
    Route.DIRECT: OrchestratorState.DIRECT_ANSWER,
    Route.VISUAL: OrchestratorState.VISUAL_ONLY,
    Route.AGENTIC: OrchestratorState.AGENTIC_ONLY,
    Route.BOTH: OrchestratorState.VISUAL_AND_AGENTIC,
}


class ResponseOrchestrator:
    """Turns a pending (image, prompt) pair into one cleaned answer.

    One instance per session. It owns the session id, the conversation log
    and the pending request; callers interact only through ``add_image``,
    ``add_prompt`` and ``compute``.

    ``compute`` never raises: backend faults degrade to empty text, and
    anything else becomes a sentinel message.
    """

    def __init__(
        self,
        fast: ChatBackend,
        non_agentic: ChatBackend,
        agentic: ChatBackend,
        vision: VisionDescriber,
        transcription: TranscriptionGateway | None = None,
        image_reader: ImageReader | None = None,
        session: Session | None = None,
    ) -> None:
        self.fast = fast
        self.non_agentic = non_agentic
        self.agentic = agentic
        self.vision = vision
        self.transcription = transcription
        self.image_reader = image_reader or LocalFileImageReader()
        self.session = session or Session.create()
        self.log = ConversationLog()
        self.pending = PendingRequest()

        self._state = OrchestratorState.IDLE
        self._busy = False
        self.logger = get_logger("orchestrator", session_id=self.session.session_id)

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        mock_mode: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ResponseOrchestrator:
        """Wire up the real (or mock) backends described by ``config``."""
        config = config or load_config()
        if mock_mode is None:
            mock_mode = config.mock_mode

        session = Session.create(config.device.platform)

        if mock_mode:
            return cls(
                fast=MockChatBackend(BackendVariant.FAST),
                non_agentic=MockChatBackend(BackendVariant.NON_AGENTIC),
                agentic=MockChatBackend(BackendVariant.AGENTIC),
                vision=MockVisionDescriber(),
                transcription=MockTranscriptionGateway(),
                session=session,
            )

        def chat(variant: BackendVariant) -> ASIChatBackend:
            return ASIChatBackend.from_config(variant, config.asi, session.session_id, transport)

        return cls(
            fast=chat(BackendVariant.FAST),
            non_agentic=chat(BackendVariant.NON_AGENTIC),
            agentic=chat(BackendVariant.AGENTIC),
            vision=OpenAIVisionDescriber.from_config(config.openai, transport),
            transcription=OpenAITranscriptionGateway.from_config(config.openai, transport),
            session=session,
        )

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def session_id(self) -> str:
        return self.session.session_id

    # Intake

    async def add_image(self, source: Any) -> None:
        """Store the image to answer about, replacing any pending one.

        Raises:
            InvalidImageInput: The source has no usable content.
        """
        self.pending.image = await normalize_image(source, self.image_reader)
        self.logger.debug("image_added", image_length=len(self.pending.image))

    def add_prompt(self, text: str) -> None:
        """Store the prompt verbatim, replacing any pending one."""
        self.pending.prompt = text
        self.logger.debug("prompt_added", prompt=text)

    async def transcribe_audio(self, audio_ref: str, media_type: str = "audio/m4a") -> str:
        """Transcribe a recorded prompt; ``""`` if it failed or no gateway is set."""
        if self.transcription is None:
            self.logger.warning("transcription_unavailable")
            return ""
        try:
            return await self.transcription.transcribe(audio_ref, media_type)
        except Exception as e:
            self.logger.exception("transcription_error", error=str(e))
            return ""

    async def ask(self, image: Any, prompt: str) -> str:
        """Convenience wrapper: set both inputs then compute."""
        await self.add_image(image)
        self.add_prompt(prompt)
        return await self.compute()

    # Response

    async def compute(self) -> str:
        """Answer the pending request and clear it.

        Returns:
            The cleaned answer, or a user-facing sentinel message.
        """
        if self._busy:
            self.logger.warning("compute_rejected_busy")
            return BUSY_MESSAGE

        try:
            image, prompt = self.pending.consume()
        except MissingPendingData as e:
            self.logger.error("missing_pending_data", missing=e.missing)
            if e.missing == "image":
                return MISSING_IMAGE_MESSAGE
            return MISSING_PROMPT_MESSAGE

        self._busy = True
        self.logger.info("compute_started", prompt=prompt)
        try:
            answer = await self._respond(image, prompt)
        except Exception as e:
            self.logger.exception("compute_failed", error=str(e))
            return COMPUTE_FAILED_MESSAGE
        finally:
            self.pending.reset()
            self._busy = False
            self._state = OrchestratorState.IDLE

        if not answer:
            self.logger.warning("empty_answer")
            return EMPTY_ANSWER_MESSAGE
        return answer

    async def _respond(self, image: str, prompt: str) -> str:
        self._state = OrchestratorState.CLASSIFYING
        history = Message("user", prompts.LOG_PREFIX + self.log.snapshot())

        reply = await self._ask(
            self.fast,
            [
                history,
                Message("user", prompts.CLASSIFIER_INSTRUCTION),
                Message("user", prompt),
            ],
        )
        classification = parse_classification(reply)
        self._state = _BRANCH_STATES[classification.route]
        self.logger.info("classification_received", route=classification.route.value)

        visual_info, raw = await self._dispatch(classification, history, image, prompt)
        output = strip_reasoning(raw)

        self.log.append(TurnRole.USER_PROMPT, prompt)
        self.log.append(TurnRole.VISUAL_CONTEXT, visual_info)
        self.log.append(TurnRole.ASSISTANT_OUTPUT, output)
        self._state = OrchestratorState.LOGGED

        self.logger.info(
            "response_logged",
            route=classification.route.value,
            answer_preview=output[:100],
        )
        return output

    async def _dispatch(
        self,
        classification: Classification,
        history: Message,
        image: str,
        prompt: str,
    ) -> tuple[str, str]:
        """Run the branch; returns ``(visual_info, raw_answer)``."""
        route = classification.route

        if route is Route.DIRECT:
            return NOT_AVAILABLE, classification.answer

        if route is Route.AGENTIC:
            reply = await self._ask(
                self.agentic,
                [
                    Message("system", history.content),
                    Message("system", prompts.AGENTIC_INSTRUCTION),
                    Message("user", prompt),
                ],
            )
            return NOT_AVAILABLE, reply

        visual_info = await self._describe(image)
        context = prompts.VISUAL_CONTEXT_PREFIX + visual_info

        if route is Route.VISUAL:
            reply = await self._ask(
                self.non_agentic,
                [
                    history,
                    Message("user", prompts.VISUAL_INSTRUCTION),
                    Message("user", context),
                    Message("user", prompt),
                ],
            )
        else:
            reply = await self._ask(
                self.agentic,
                [
                    Message("system", history.content),
                    Message("system", prompts.VISUAL_AGENTIC_INSTRUCTION),
                    Message("system", context),
                    Message("user", prompt),
                ],
            )
        return visual_info, reply

    async def _ask(self, backend: ChatBackend, messages: list[Message]) -> str:
        variant = getattr(backend, "variant", None)
        name = variant.value if isinstance(variant, BackendVariant) else type(backend).__name__
        try:
            result = await backend.complete(messages)
        except Exception as e:
            self.logger.exception("backend_call_failed", backend=name, error=str(e))
            return ""

        if not result.ok:
            self.logger.warning("backend_unavailable", backend=name, error=result.error.message)
        return result.text_or_empty()

    async def _describe(self, image: str) -> str:
        try:
            result = await self.vision.describe(image)
        except Exception as e:
            self.logger.exception("backend_call_failed", backend="vision", error=str(e))
            return ""

        if not result.ok:
            self.logger.warning("backend_unavailable", backend="vision", error=result.error.message)
        return result.text_or_empty()
