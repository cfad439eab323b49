"""Rewrite raw subtitle spans into short punchlines, falling back to the raw text."""
from __future__ import annotations

import json
import logging
from typing import Optional

from mememachine.config import QUOTE_LIMIT
from mememachine.llm.client import TextClient, extract_json_array
from mememachine.outcome import attempt
from mememachine.text import normalize, truncate_quote

_logger = logging.getLogger("mememachine")

PUNCHLINE_PROMPT_TEMPLATE = """You are picking meme captions for Simpsons screenshots.

User scenario: "{scenario}"

Below is a JSON array of raw subtitle excerpts, one per screenshot. For each excerpt, return the single funniest, most quotable line (or a tight combination of setup and punchline) that fits the scenario. Use only words that appear in that excerpt. Keep each quote under {limit} characters. If an excerpt is empty or has nothing usable, return an empty string for it.

Excerpts:
{captions}

Return ONLY a JSON array of exactly {count} strings, in the same order, nothing else."""


def build_punchline_prompt(scenario: str, captions: list[str]) -> str:
    return PUNCHLINE_PROMPT_TEMPLATE.format(
        scenario=scenario,
        limit=QUOTE_LIMIT,
        captions=json.dumps(captions, ensure_ascii=False),
        count=len(captions),
    )


def _merge_punchlines(rewritten: list, captions: list[str]) -> list[str]:
    """Take each usable rewrite, else the raw caption at that position."""
    merged: list[str] = []
    for quote, raw in zip(rewritten, captions):
        if isinstance(quote, str) and quote.strip():
            merged.append(truncate_quote(normalize(quote)))
        else:
            merged.append(raw)
    return merged


def select_punchlines(
    scenario: str,
    captions: list[str],
    client: Optional[TextClient] = None,
) -> list[str]:
    """Return one display quote per caption, same length and order as *captions*.

    Any failure, or a response of the wrong length, returns *captions*
    unchanged. Never raises.
    """
    if not any(captions):
        return list(captions)
    if client is None:
        client = TextClient.from_env()
    if client is None:
        return list(captions)

    prompt = build_punchline_prompt(scenario, captions)
    outcome = attempt(lambda: extract_json_array(client.complete(prompt, max_tokens=1024)))
    if not outcome.succeeded:
        _logger.warning("Punchline selection unavailable: %s — using raw captions", outcome.error)
        return list(captions)

    rewritten = outcome.unwrap_or([])
    if len(rewritten) != len(captions):
        _logger.warning(
            "Punchline selection returned %d quotes for %d captions — using raw captions",
            len(rewritten),
            len(captions),
        )
        return list(captions)
    return _merge_punchlines(rewritten, captions)
