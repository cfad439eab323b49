"""Concurrent search and caption fetches with per-call failure isolation."""
from __future__ import annotations

from typing import TYPE_CHECKING

from mememachine.models import CaptionSet, Frame
from mememachine.outcome import Outcome, gather_outcomes

if TYPE_CHECKING:
    from mememachine.search.frinkiac import FrinkiacClient


def search_all(queries: list[str], client: "FrinkiacClient") -> list[list[Frame | None]]:
    """Run every query concurrently. A failed query contributes an empty list."""
    outcomes = gather_outcomes(client.search, queries)
    return [outcome.unwrap_or([]) for outcome in outcomes]


def fetch_captions(frames: list[Frame], client: "FrinkiacClient") -> list[Outcome[CaptionSet]]:
    """Fetch captions for every frame concurrently, one Outcome per frame, in order."""
    return gather_outcomes(client.caption, frames)
