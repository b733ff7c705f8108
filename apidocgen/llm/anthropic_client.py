"""Adapter for the Anthropic Messages API."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import anthropic

from ..logging import get_logger
from .base import LLMError, RequestGate, shared_gate
from .messages import ChatMessage, ChatRequest, ChatResponse, ToolCall, ToolSpec
from .usage import TokenUsage, UsageTracker, estimate_cost


class AnthropicRunner:
    """Executes chat requests through the official ``anthropic`` SDK."""

    DEFAULT_MODEL = "claude-haiku-4-5"
    DEFAULT_MAX_TOKENS = 4096
    ENV_API_KEY = "ANTHROPIC_API_KEY"

    def __init__(
        self,
        model: str | None = None,
        *,
        api_key: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_retries: int = 3,
        usage: UsageTracker | None = None,
        gate: RequestGate | None = None,
        client: Any = None,
    ) -> None:
        self.model = model or self.DEFAULT_MODEL
        self.api_key = api_key or os.getenv(self.ENV_API_KEY)
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.usage = usage
        self.gate = gate or shared_gate()
        self._client = client
        self.logger = get_logger("llm.anthropic")

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise LLMError(f"Anthropic API key missing; set {self.ENV_API_KEY}")
            self._client = anthropic.Anthropic(api_key=self.api_key, max_retries=self.max_retries)
        return self._client

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send the conversation and return the normalized reply."""
        params: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": request.max_tokens or self.max_tokens,
            "messages": [self._message_param(message) for message in request.messages],
        }
        if request.system:
            system_block: Dict[str, Any] = {"type": "text", "text": request.system}
            if request.cache_system:
                system_block["cache_control"] = {"type": "ephemeral"}
            params["system"] = [system_block]
        if request.tools:
            params["tools"] = [self._tool_param(tool) for tool in request.tools]

        with self.gate:
            try:
                message = self.client.messages.create(**params)
            except anthropic.APIError as exc:
                raise LLMError(f"Anthropic request failed: {exc}") from exc

        response = self._parse_message(message)
        self.logger.debug(
            "Anthropic call finished (stop=%s, in=%d, out=%d)",
            response.stop_reason,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        if self.usage is not None:
            self.usage.add(response.usage)
        return response

    @staticmethod
    def _message_param(message: ChatMessage) -> Dict[str, Any]:
        if message.tool_results:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.call_id,
                        "content": json.dumps(result.payload, ensure_ascii=False),
                    }
                    for result in message.tool_results
                ],
            }
        if not message.tool_calls:
            return {"role": message.role, "content": message.content}

        blocks: List[Dict[str, Any]] = []
        if message.content:
            blocks.append({"type": "text", "text": message.content})
        for call in message.tool_calls:
            blocks.append(
                {"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments}
            )
        return {"role": message.role, "content": blocks}

    @staticmethod
    def _tool_param(tool: ToolSpec) -> Dict[str, Any]:
        return {"name": tool.name, "description": tool.description, "input_schema": tool.input_schema}

    def _parse_message(self, message: Any) -> ChatResponse:
        texts: List[str] = []
        calls: List[ToolCall] = []
        for block in getattr(message, "content", None) or []:
            kind = getattr(block, "type", None)
            if kind == "text":
                texts.append(block.text)
            elif kind == "tool_use":
                arguments = block.input if isinstance(block.input, dict) else {}
                calls.append(ToolCall(id=block.id, name=block.name, arguments=arguments))
        return ChatResponse(
            text="\n".join(texts),
            tool_calls=tuple(calls),
            stop_reason=getattr(message, "stop_reason", None),
            usage=self._parse_usage(getattr(message, "usage", None)),
        )

    def _parse_usage(self, usage: Optional[Any]) -> TokenUsage:
        if usage is None:
            return TokenUsage()
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0
        cache_write = getattr(usage, "cache_creation_input_tokens", 0) or 0
        cache_read = getattr(usage, "cache_read_input_tokens", 0) or 0
        return TokenUsage(
            input_tokens=input_tokens + cache_write,
            output_tokens=output_tokens,
            cached_tokens=cache_read,
            dollar_cost=estimate_cost(
                self.model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                cache_write_tokens=cache_write,
                cache_read_tokens=cache_read,
            ),
        )


__all__ = ["AnthropicRunner"]
