"""Scripted chat runner used in place of a real model."""

from __future__ import annotations

from typing import Callable, Iterable, List, Union

from apidocgen.llm.messages import ChatRequest, ChatResponse

Reply = Union[ChatResponse, Callable[[ChatRequest], ChatResponse], Exception]


class ScriptedRunner:
    """Answers each call with the next scripted reply; the last one repeats."""

    def __init__(self, replies: Iterable[Reply]) -> None:
        self._replies: List[Reply] = list(replies)
        if not self._replies:
            raise ValueError("at least one reply is required")
        self.requests: List[ChatRequest] = []

    def chat(self, request: ChatRequest) -> ChatResponse:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self._replies) - 1)
        reply = self._replies[index]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    @property
    def calls(self) -> int:
        return len(self.requests)


class RoutingRunner:
    """Sends tool-enabled requests to one runner and plain requests to another."""

    def __init__(self, collect: ScriptedRunner, generate: ScriptedRunner) -> None:
        self.collect = collect
        self.generate = generate

    def chat(self, request: ChatRequest) -> ChatResponse:
        if request.tools:
            return self.collect.chat(request)
        return self.generate.chat(request)


__all__ = ["RoutingRunner", "ScriptedRunner"]
