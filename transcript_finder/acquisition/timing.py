# transcript_finder/acquisition/timing.py
"""
Time keeping for an acquisition run.

This module defines:
- timer(): consistent execution_time_ms measurement
- Deadline: the caller-supplied wall-clock ceiling for a whole request
- call_with_timeout(): an independent cancellation timer around one blocking call
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from transcript_finder.acquisition.errors import TimeoutExceeded


T = TypeVar("T")


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Context manager that provides an end() function returning elapsed time in milliseconds.

    Usage:
        with timer() as end:
            # do work
            pass
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end


class Deadline:
    """Overall budget for one request; hands out per-call timeouts."""

    def __init__(self, budget_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.budget_seconds = budget_seconds
        self._clock = clock
        self._expires_at = clock() + budget_seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def timeout_for(self, call_timeout: float) -> float:
        """Per-call timeout clipped to what is left of the budget."""
        remaining = self.remaining()
        if remaining <= 0:
            raise TimeoutExceeded(
                f"Overall budget of {self.budget_seconds:.1f}s exhausted",
                timeout=self.budget_seconds,
            )
        return min(call_timeout, remaining)


def call_with_timeout(func: Callable[..., T], timeout: float, *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking call with its own cancellation timer.

    On expiry the caller gets TimeoutExceeded right away; the worker thread is
    abandoned, not joined.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="transcript-call")
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeout as exc:
        future.cancel()
        name = getattr(func, "__qualname__", repr(func))
        raise TimeoutExceeded(f"{name} timed out after {timeout:.1f}s", timeout=timeout) from exc
    finally:
        executor.shutdown(wait=False)
