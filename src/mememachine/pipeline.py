"""End-to-end search: scenario in, captioned meme cards out.

Stages
------
1. expand the scenario into search queries (pass-through without an API key)
2. run every query against Frinkiac concurrently
3. aggregate the rankings into a deduplicated shortlist
4. fetch captions for the shortlist concurrently
5. pick a raw quote per frame and optionally rewrite it into a punchline
6. build cards; frames whose caption fetch failed or whose quote does not
   fit the overlay are dropped

Only stage failures that are not already converted to a fallback escape,
and they are re-raised as SearchFailedError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from mememachine.cards import build_card
from mememachine.config import MAX_RESULTS
from mememachine.errors import MemeMachineError, SearchFailedError
from mememachine.llm.client import TextClient
from mememachine.llm.punchlines import select_punchlines
from mememachine.llm.queries import expand_scenario
from mememachine.models import Frame, MemeCard
from mememachine.search.aggregate import score_frames, suppress_near_duplicates
from mememachine.search.fanout import fetch_captions, search_all
from mememachine.search.frinkiac import FrinkiacClient
from mememachine.text import pick_quote

_logger = logging.getLogger("mememachine")


@dataclass
class SearchReport:
    scenario: str
    queries: list[str] = field(default_factory=list)
    frames: list[Frame] = field(default_factory=list)
    cards: list[MemeCard] = field(default_factory=list)
    scores: dict[tuple[str, int], float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.cards


def run_search(
    scenario: str,
    max_results: int = MAX_RESULTS,
    frinkiac: Optional[FrinkiacClient] = None,
    text_client: Optional[TextClient] = None,
    use_punchlines: bool = True,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> SearchReport:
    """Run the whole search for *scenario* and return a SearchReport.

    An empty report (``report.is_empty``) is the normal no-results outcome.
    """
    def _progress(message: str) -> None:
        if progress_callback:
            progress_callback(message)

    if frinkiac is None:
        frinkiac = FrinkiacClient()
    if text_client is None:
        text_client = TextClient.from_env()

    report = SearchReport(scenario=scenario)
    try:
        _progress("Consulting Professor Frink…")
        report.queries = expand_scenario(scenario, text_client)

        _progress("Searching Springfield…")
        result_lists = search_all(report.queries, frinkiac)

        scored = score_frames(result_lists)
        report.frames = suppress_near_duplicates(scored, max_results)
        report.scores = {s.frame.key: s.score for s in scored}
        if not report.frames:
            return report

        _progress("Finding the quotes…")
        captions = fetch_captions(report.frames, frinkiac)
        raw_quotes = [
            pick_quote(outcome.value) if outcome.succeeded else ""
            for outcome in captions
        ]

        quotes = raw_quotes
        if use_punchlines:
            _progress("Picking the punchlines…")
            quotes = select_punchlines(scenario, raw_quotes, text_client)

        for frame, outcome, quote in zip(report.frames, captions, quotes):
            if not outcome.succeeded:
                continue
            card = build_card(frame, outcome.value, quote, frinkiac)
            if card is not None:
                report.cards.append(card)
    except MemeMachineError:
        raise
    except Exception as exc:
        _logger.exception("Search failed for %r", scenario)
        raise SearchFailedError(scenario, str(exc)) from exc

    _logger.debug(
        "Scenario %r: %d queries, %d frames, %d cards",
        scenario, len(report.queries), len(report.frames), len(report.cards),
    )
    return report
