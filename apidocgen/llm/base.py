"""Runner contract and the process-wide limit on in-flight model calls."""

from __future__ import annotations

import threading
from typing import Protocol

from .messages import ChatRequest, ChatResponse

DEFAULT_MAX_CONCURRENCY = 10


class LLMError(RuntimeError):
    """Raised when the model service cannot be reached or answers garbage."""


class ChatRunner(Protocol):
    """Anything that can send a chat request to a model."""

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send ``request`` and return the normalized reply."""


class RequestGate:
    """Caps concurrent model requests; callers beyond the cap block."""

    def __init__(self, limit: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if limit < 1:
            raise ValueError("RequestGate limit must be at least 1")
        self.limit = limit
        self._semaphore = threading.BoundedSemaphore(limit)

    def __enter__(self) -> "RequestGate":
        self._semaphore.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:  # type: ignore[no-untyped-def]
        self._semaphore.release()
        return False


_SHARED_GATE = RequestGate()


def shared_gate() -> RequestGate:
    """Return the gate used by runners that were not given their own."""
    return _SHARED_GATE


__all__ = ["ChatRunner", "DEFAULT_MAX_CONCURRENCY", "LLMError", "RequestGate", "shared_gate"]
