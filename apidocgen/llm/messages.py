"""Provider-neutral chat messages exchanged with tool-using models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .usage import TokenUsage

STOP_TOOL_USE = "tool_use"
STOP_END_TURN = "end_turn"
STOP_MAX_TOKENS = "max_tokens"


@dataclass(frozen=True)
class ToolSpec:
    """A tool the model may call, described by a JSON schema."""

    name: str
    description: str
    input_schema: Dict[str, Any]


@dataclass(frozen=True)
class ToolCall:
    """A structured request from the model to run a named tool."""

    id: str
    name: str
    arguments: Dict[str, Any]


@dataclass(frozen=True)
class ToolResult:
    """The JSON-serializable answer to one tool call."""

    call_id: str
    payload: Dict[str, Any]


@dataclass(frozen=True)
class ChatMessage:
    """One conversation turn; assistant turns may carry tool calls."""

    role: str
    content: str = ""
    tool_calls: Tuple[ToolCall, ...] = ()
    tool_results: Tuple[ToolResult, ...] = ()

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str, tool_calls: Tuple[ToolCall, ...] = ()) -> "ChatMessage":
        return cls(role="assistant", content=content, tool_calls=tool_calls)

    @classmethod
    def results(cls, tool_results: Tuple[ToolResult, ...]) -> "ChatMessage":
        return cls(role="user", tool_results=tool_results)


@dataclass
class ChatRequest:
    """Everything a runner needs for a single model call."""

    system: str
    messages: List[ChatMessage]
    tools: List[ToolSpec] = field(default_factory=list)
    max_tokens: Optional[int] = None
    cache_system: bool = False


@dataclass(frozen=True)
class ChatResponse:
    """Normalized model reply."""

    text: str
    tool_calls: Tuple[ToolCall, ...] = ()
    stop_reason: Optional[str] = None
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def wants_tools(self) -> bool:
        return self.stop_reason == STOP_TOOL_USE


__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "STOP_END_TURN",
    "STOP_MAX_TOKENS",
    "STOP_TOOL_USE",
    "ToolCall",
    "ToolResult",
    "ToolSpec",
]
