"""Token accounting shared by every model call of a run."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Tuple

# USD per 1K tokens: input, output, cache write, cache read.
_PRICING: Dict[str, Tuple[float, float, float, float]] = {
    "claude-haiku-4-5": (0.001, 0.005, 0.00125, 0.0001),
    "claude-sonnet-4-5": (0.003, 0.015, 0.00375, 0.0003),
}


@dataclass(frozen=True)
class TokenUsage:
    """Token counters and cost for one or more model calls."""

    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    dollar_cost: float = 0.0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cached_tokens=self.cached_tokens + other.cached_tokens,
            dollar_cost=self.dollar_cost + other.dollar_cost,
        )


def estimate_cost(
    model: str,
    *,
    input_tokens: int,
    output_tokens: int,
    cache_write_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> float:
    """Return the USD cost of a call, or 0.0 for models without a price entry."""
    for prefix, (inp, out, write, read) in _PRICING.items():
        if model.startswith(prefix):
            return (
                input_tokens / 1000 * inp
                + output_tokens / 1000 * out
                + cache_write_tokens / 1000 * write
                + cache_read_tokens / 1000 * read
            )
    return 0.0


class UsageTracker:
    """Thread-safe, add-only accumulator for token usage."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = TokenUsage()
        self._calls = 0

    def add(self, usage: TokenUsage) -> None:
        with self._lock:
            self._total = self._total + usage
            self._calls += 1

    @property
    def total(self) -> TokenUsage:
        with self._lock:
            return self._total

    @property
    def calls(self) -> int:
        with self._lock:
            return self._calls


__all__ = ["TokenUsage", "UsageTracker", "estimate_cost"]
