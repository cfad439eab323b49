"""Subtitle text cleanup, overlay word-wrapping, and quote extraction."""

from __future__ import annotations

import re

from mememachine.config import MAX_OVERLAY_LINES, QUOTE_LIMIT, WRAP_WIDTH
from mememachine.models import CaptionSet

_WHITESPACE_RE = re.compile(r"\s+")
ELLIPSIS = "..."


def normalize(text: str) -> str:
    """Collapse whitespace runs to single spaces, trim, and upper-case."""
    return _WHITESPACE_RE.sub(" ", text).strip().upper()


def wrap(text: str, max_width: int = WRAP_WIDTH) -> str:
    """Greedily pack words into lines of at most *max_width* characters.

    A word longer than *max_width* is placed alone on its own line and is
    never split. Returns the lines joined with newlines.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_width:
            if current:
                lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return "\n".join(lines)


def fits_overlay(text: str, max_lines: int = MAX_OVERLAY_LINES) -> bool:
    """Return True if *text* wraps to at most *max_lines* overlay lines."""
    wrapped = wrap(text)
    return bool(wrapped) and len(wrapped.split("\n")) <= max_lines


def truncate_quote(text: str, limit: int = QUOTE_LIMIT) -> str:
    """Cut *text* to at most *limit* characters at a word boundary.

    Truncated text ends with ``...``; text already within the limit is
    returned unchanged.
    """
    if len(text) <= limit:
        return text
    cut = text[: limit - len(ELLIPSIS)]
    boundary = cut.rfind(" ")
    if boundary > 0:
        cut = cut[:boundary]
    return cut.rstrip() + ELLIPSIS


def pick_quote(caption_set: CaptionSet) -> str:
    """Build one display quote from every subtitle line of *caption_set*.

    Lines are joined in start-time order so setup and punchline read as one
    joke. Returns an empty string when there are no subtitle lines.
    """
    if not caption_set.subtitles:
        return ""
    ordered = sorted(caption_set.subtitles, key=lambda s: s.start_ms)
    full = normalize(" ".join(s.content.strip() for s in ordered))
    return truncate_quote(full)
