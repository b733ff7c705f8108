"""Fixed-delay retry for a unit of work whose failures the caller classifies."""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from .logging import get_logger

T = TypeVar("T")

_logger = get_logger("retry")


def _always(_: Exception) -> bool:
    return True


def retry(
    block: Callable[[int], T],
    *,
    times: int = 3,
    delay: float = 1.0,
    retry_on: Callable[[Exception], bool] = _always,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``block(attempt)`` up to ``times`` times.

    ``attempt`` is 0-based. Errors rejected by ``retry_on`` propagate at once;
    otherwise the call sleeps ``delay`` seconds between attempts and re-raises
    the last error when every attempt failed. Whatever ``block`` returns,
    ``None`` included, is passed straight back.
    """
    if times < 1:
        raise ValueError("times must be at least 1")

    for attempt in range(times - 1):
        try:
            return block(attempt)
        except Exception as exc:
            if not retry_on(exc):
                raise
            _logger.info("Attempt %d/%d failed: %s; retrying", attempt + 1, times, exc)
            sleep(delay)
    return block(times - 1)


__all__ = ["retry"]
