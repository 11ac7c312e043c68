"""Session identity and the rolling conversation log."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from enum import Enum

from aria.common.logging import get_logger

EMPTY_SNAPSHOT = "[]"


class TurnRole(str, Enum):
    """Role tag of a logged turn."""

    USER_PROMPT = "user-prompt"
    VISUAL_CONTEXT = "visual-context"
    ASSISTANT_OUTPUT = "assistant-output"


@dataclass(frozen=True)
class Session:
    """Identifies one device run."""

    session_id: str

    @classmethod
    def create(cls, platform: str = "python") -> Session:
        """Create a session id like ``ios-session-k3x9q2``."""
        return cls(session_id=f"{platform}-session-{uuid.uuid4().hex[:6]}")


@dataclass(frozen=True)
class ConversationTurn:
    """One logged exchange event."""

    role: TurnRole
    text: str


class ConversationLog:
    """Append-only, ordered record of turns for one session.

    The log is unbounded for the lifetime of the orchestrator that owns it.
    """

    def __init__(self) -> None:
        self._turns: list[ConversationTurn] = []
        self.logger = get_logger("conversation_log")

    def append(self, role: TurnRole | str, text: str) -> None:
        """Append a turn. Never raises."""
        try:
            self._turns.append(ConversationTurn(role=TurnRole(role), text=str(text)))
        except Exception as e:
            self.logger.warning("log_append_failed", role=str(role), error=str(e))

    def snapshot(self) -> str:
        """Serialize all turns, oldest first, as a JSON array."""
        try:
            return json.dumps(
                [{"role": turn.role.value, "message": turn.text} for turn in self._turns]
            )
        except (TypeError, ValueError) as e:
            self.logger.warning("log_snapshot_failed", error=str(e))
            return EMPTY_SNAPSHOT

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)
