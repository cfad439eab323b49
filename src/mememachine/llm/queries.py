"""Scenario → Frinkiac search phrases via text generation, with pass-through fallback."""
from __future__ import annotations

import logging
from typing import Optional

from mememachine.config import MAX_QUERIES
from mememachine.llm.client import TextClient, extract_json_array
from mememachine.outcome import attempt

_logger = logging.getLogger("mememachine")

QUERY_PROMPT_TEMPLATE = """You are a Simpsons expert helping search Frinkiac, a subtitle database for every Simpsons episode.

User scenario: "{scenario}"

Generate 4 short search queries (2-5 words each) that will find the best matching Simpsons scenes in the subtitle database.

Think about:
- What exact words or dialogue would appear in the actual subtitles of the matching scene?
- Do you recognise a specific famous scene? If so, use the character's real dialogue from that scene.
- Character names + specific phrases work better than descriptive terms.
- Subtitles are written in plain spoken English.

Return ONLY a JSON array of strings, nothing else.
Example: ["homer forbidden donut", "mmm donuts", "is there anything", "17 donuts"]"""


def build_query_prompt(scenario: str) -> str:
    return QUERY_PROMPT_TEMPLATE.format(scenario=scenario)


def _clean_queries(parsed: list) -> list[str]:
    """Keep non-empty string entries, trimmed, capped at MAX_QUERIES."""
    queries = [q.strip() for q in parsed if isinstance(q, str) and q.strip()]
    return queries[:MAX_QUERIES]


def expand_scenario(scenario: str, client: Optional[TextClient] = None) -> list[str]:
    """Turn a free-text scenario into a few short subtitle-style search queries.

    Returns ``[scenario]`` when text generation is not configured, fails, or
    yields nothing usable. Never raises.
    """
    if client is None:
        client = TextClient.from_env()
    if client is None:
        _logger.debug("ANTHROPIC_API_KEY not set — searching for the scenario as typed")
        return [scenario]

    outcome = attempt(
        lambda: _clean_queries(extract_json_array(client.complete(build_query_prompt(scenario))))
    )
    queries = outcome.unwrap_or([])
    if not outcome.succeeded:
        _logger.warning(
            "Query expansion unavailable: %s — using the scenario as the only query",
            outcome.error,
        )
    elif not queries:
        _logger.warning("Query expansion returned no queries — using the scenario as the only query")
    return queries or [scenario]
