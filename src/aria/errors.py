"""Exception types for the Aria assistant.

Only ``InvalidImageInput`` ever reaches the caller of the orchestrator; the
rest are converted to empty results or sentinel strings at the orchestrator
boundary.
"""

from __future__ import annotations


class AriaError(Exception):
    """Base class for assistant errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidImageInput(AriaError):
    """Raised when an image source yields no usable base64 content."""


class MissingPendingData(AriaError):
    """Raised when a response is requested without both an image and a prompt."""

    def __init__(self, message: str, missing: str) -> None:
        super().__init__(message)
        self.missing = missing


class BackendUnavailable(AriaError):
    """A backend call could not produce text (no credentials, transport or parse fault)."""

    def __init__(self, message: str, backend: str) -> None:
        super().__init__(message)
        self.backend = backend
