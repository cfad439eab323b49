"""Outcome values and the join-all fan-out used by every external call.

An Outcome records whether one call produced a value or failed, so call
sites can pick their fallback explicitly with ``unwrap_or`` instead of
wrapping each call in try/except.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

from mememachine.config import MAX_WORKERS

_logger = logging.getLogger("mememachine")

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: Exception | None = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, error: Exception) -> "Outcome[T]":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or *default* when the call failed."""
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]


def attempt(fn: Callable[[], T]) -> Outcome[T]:
    """Run *fn* and capture its result or exception as an Outcome."""
    try:
        return Outcome.ok(fn())
    except Exception as exc:
        return Outcome.failed(exc)


def gather_outcomes(
    fn: Callable[[T], R],
    items: Sequence[T],
    max_workers: int = MAX_WORKERS,
) -> list[Outcome[R]]:
    """Call *fn* on every item concurrently and wait for all of them.

    Results come back in the order of *items*. A failing call yields a failed
    Outcome in its slot and never cancels the others.
    """
    if not items:
        return []

    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(attempt, lambda item=item: fn(item)) for item in items]
        outcomes = [future.result() for future in futures]

    for item, outcome in zip(items, outcomes):
        if not outcome.succeeded:
            _logger.warning("Call failed for %r: %s", item, outcome.error)
    return outcomes
