"""Classification of queries into response branches, and reply cleanup."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)


class Route(Enum):
    """Response branch chosen by the classifier."""

    VISUAL = "v"
    AGENTIC = "a"
    BOTH = "b"
    DIRECT = "direct"


@dataclass(frozen=True)
class Classification:
    """Parsed classifier reply. ``answer`` is only set for ``Route.DIRECT``."""

    route: Route
    answer: str = ""


_LABELS = {
    Route.VISUAL.value: Route.VISUAL,
    Route.AGENTIC.value: Route.AGENTIC,
    Route.BOTH.value: Route.BOTH,
}


def parse_classification(reply: str) -> Classification:
    """Map a classifier reply to a route.

    The trimmed reply must equal ``v``, ``a`` or ``b`` exactly (case
    sensitive); anything else is the classifier answering the prompt itself.
    """
    route = _LABELS.get(reply.strip())
    if route is None:
        return Classification(Route.DIRECT, answer=reply)
    return Classification(route)


def strip_reasoning(text: str) -> str:
    """Remove the first ``<think>...</think>`` block and trim whitespace."""
    return _THINK_BLOCK.sub("", text, count=1).strip()
