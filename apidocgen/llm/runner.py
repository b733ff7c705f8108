"""Adapter for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .base import LLMError, RequestGate, shared_gate
from .messages import (
    STOP_END_TURN,
    STOP_MAX_TOKENS,
    STOP_TOOL_USE,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ToolCall,
    ToolSpec,
)
from .usage import TokenUsage, UsageTracker, estimate_cost

_AUTO_BASE_URL = object()
_AUTO_API_KEY = object()

_FINISH_REASONS = {
    "tool_calls": STOP_TOOL_USE,
    "function_call": STOP_TOOL_USE,
    "stop": STOP_END_TURN,
    "length": STOP_MAX_TOKENS,
}


@dataclass
class LLMRequest:
    """A fully prepared HTTP request for the chat completions endpoint."""

    endpoint: str
    payload: Dict[str, Any]
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes chat requests against an OpenAI-compatible HTTP API."""

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    ENV_MODEL_KEYS = ("APIDOCGEN_LLM_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = ("APIDOCGEN_LLM_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = ("APIDOCGEN_LLM_API_KEY", "OPENAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None | object = _AUTO_BASE_URL,
        api_key: str | None | object = _AUTO_API_KEY,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = 120.0,
        usage: UsageTracker | None = None,
        gate: RequestGate | None = None,
        transport: Callable[[LLMRequest], Dict[str, Any]] | None = None,
    ) -> None:
        self.model = self._resolve_model(model)
        self.base_url = self._resolve_base_url(base_url)
        self.api_key = self._resolve_api_key(api_key)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self.usage = usage
        self.gate = gate or shared_gate()
        self._transport = transport or self._http_transport

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send the conversation and return the normalized reply."""
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": self._build_messages(request.system, request.messages),
        }
        if request.tools:
            payload["tools"] = [self._tool_payload(tool) for tool in request.tools]
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        max_tokens = request.max_tokens if request.max_tokens is not None else self.max_tokens
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        http_request = LLMRequest(
            endpoint=f"{self.base_url}/chat/completions",
            payload=payload,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        with self.gate:
            response_payload = self._transport(http_request)

        response = self._parse_response(response_payload)
        if self.usage is not None:
            self.usage.add(response.usage)
        return response

    @staticmethod
    def _http_transport(request: LLMRequest) -> Dict[str, Any]:
        data = json.dumps(request.payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        http_request = Request(request.endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 120.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise LLMError(f"Chat completion failed with status {exc.code}: {message}") from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise LLMError(f"Chat completion failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise LLMError("Chat completion returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise LLMError("Chat completion returned an unexpected payload")
        return payload

    @staticmethod
    def _build_messages(system: str | None, messages: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
        built: List[Dict[str, Any]] = []
        if system:
            built.append({"role": "system", "content": system})
        for message in messages:
            if message.tool_results:
                for result in message.tool_results:
                    built.append(
                        {
                            "role": "tool",
                            "tool_call_id": result.call_id,
                            "content": json.dumps(result.payload, ensure_ascii=False),
                        }
                    )
                continue
            entry: Dict[str, Any] = {"role": message.role, "content": message.content or None}
            if message.tool_calls:
                entry["tool_calls"] = [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.name,
                            "arguments": json.dumps(call.arguments, ensure_ascii=False),
                        },
                    }
                    for call in message.tool_calls
                ]
            elif entry["content"] is None:
                entry["content"] = ""
            built.append(entry)
        return built

    @staticmethod
    def _tool_payload(tool: ToolSpec) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.input_schema,
            },
        }

    def _parse_response(self, payload: Dict[str, Any]) -> ChatResponse:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise LLMError("Chat completion returned no choices")
        first = choices[0]
        message = first.get("message")
        if not isinstance(message, dict):
            message = {}

        content = message.get("content")
        text = content if isinstance(content, str) else ""
        tool_calls = tuple(self._parse_tool_calls(message.get("tool_calls")))

        finish_reason = first.get("finish_reason")
        stop_reason = _FINISH_REASONS.get(finish_reason) if isinstance(finish_reason, str) else None
        if stop_reason is None and tool_calls:
            stop_reason = STOP_TOOL_USE

        return ChatResponse(
            text=text,
            tool_calls=tool_calls,
            stop_reason=stop_reason,
            usage=self._parse_usage(payload.get("usage")),
        )

    @staticmethod
    def _parse_tool_calls(raw_calls: object) -> List[ToolCall]:
        if not isinstance(raw_calls, list):
            return []
        calls: List[ToolCall] = []
        for index, raw in enumerate(raw_calls):
            if not isinstance(raw, dict):
                continue
            function = raw.get("function")
            if not isinstance(function, dict) or not isinstance(function.get("name"), str):
                continue
            arguments: object = function.get("arguments") or {}
            if isinstance(arguments, str):
                try:
                    arguments = json.loads(arguments)
                except json.JSONDecodeError:
                    arguments = {}
            call_id = raw.get("id") if isinstance(raw.get("id"), str) else f"call_{index}"
            calls.append(
                ToolCall(
                    id=call_id,
                    name=function["name"],
                    arguments=arguments if isinstance(arguments, dict) else {},
                )
            )
        return calls

    def _parse_usage(self, raw: object) -> TokenUsage:
        if not isinstance(raw, dict):
            return TokenUsage()
        prompt_tokens = _as_count(raw.get("prompt_tokens"))
        completion_tokens = _as_count(raw.get("completion_tokens"))
        details = raw.get("prompt_tokens_details")
        cached = _as_count(details.get("cached_tokens")) if isinstance(details, dict) else 0
        return TokenUsage(
            input_tokens=prompt_tokens,
            output_tokens=completion_tokens,
            cached_tokens=cached,
            dollar_cost=estimate_cost(
                self.model, input_tokens=prompt_tokens, output_tokens=completion_tokens
            ),
        )

    def _resolve_model(self, model: str | None) -> str:
        if model:
            return model
        return self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL

    def _resolve_base_url(self, base_url: str | None | object) -> str:
        if isinstance(base_url, str) and base_url:
            return base_url.rstrip("/")
        env_value = self._first_env_value(self.ENV_BASE_URL_KEYS)
        if env_value:
            return env_value.rstrip("/")
        return self.DEFAULT_BASE_URL

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return api_key  # type: ignore[return-value]

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


def _as_count(value: object) -> int:
    return value if isinstance(value, int) else 0


__all__ = ["LLMRequest", "LLMRunner"]
