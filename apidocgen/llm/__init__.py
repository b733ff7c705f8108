"""Model transports and the tools the model may call."""

from .anthropic_client import AnthropicRunner
from .base import DEFAULT_MAX_CONCURRENCY, ChatRunner, LLMError, RequestGate, shared_gate
from .messages import ChatMessage, ChatRequest, ChatResponse, ToolCall, ToolResult, ToolSpec
from .runner import LLMRequest, LLMRunner
from .tools import GET_FILE_TOOL, GetFileTool, RetrievalResult
from .usage import TokenUsage, UsageTracker, estimate_cost

__all__ = [
    "AnthropicRunner",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ChatRunner",
    "DEFAULT_MAX_CONCURRENCY",
    "GET_FILE_TOOL",
    "GetFileTool",
    "LLMError",
    "LLMRequest",
    "LLMRunner",
    "RequestGate",
    "RetrievalResult",
    "TokenUsage",
    "ToolCall",
    "ToolResult",
    "ToolSpec",
    "UsageTracker",
    "estimate_cost",
    "shared_gate",
]
