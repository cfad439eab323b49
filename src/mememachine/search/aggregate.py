"""Merge several ranked search result lists into one shortlist of frames.

Scoring
-------
Every list a frame appears in adds ``1 + (1 - rank / len(list))``: one point
for appearing at all plus a rank bonus in (0, 1]. Queries that agree on a
frame therefore push it above frames that only one query liked, even when no
single query ranked it first. A frame repeated inside one list counts once,
at its first rank.

Suppression
-----------
The search service returns near-identical stills a few seconds apart as
separate hits. Walking the score-ordered frames from the top, a frame is
kept only if it is at least ``MIN_GAP_MS`` away from every frame already
kept from the same episode. Frames from different episodes never compete.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from mememachine.config import MAX_RESULTS, MIN_GAP_MS
from mememachine.models import Frame, ScoredFrame


def score_frames(result_lists: Iterable[object]) -> list[ScoredFrame]:
    """Accumulate per-frame scores across *result_lists* and sort them.

    Entries that are not lists (a failed query, a malformed response)
    contribute nothing. The first list to mention a frame supplies the Frame
    object kept for it. Returned frames are ordered by descending score; ties
    keep first-seen order.
    """
    scored: dict[tuple[str, int], ScoredFrame] = {}

    for results in result_lists:
        if not isinstance(results, (list, tuple)):
            continue
        total = len(results)
        seen_this_list: set[tuple[str, int]] = set()

        for rank, frame in enumerate(results):
            if not isinstance(frame, Frame):
                continue
            key = frame.key
            if key in seen_this_list:
                continue
            seen_this_list.add(key)

            contribution = 1.0 + (1.0 - rank / total)
            entry = scored.get(key)
            if entry is None:
                scored[key] = ScoredFrame(frame=frame, score=contribution, order=len(scored))
            else:
                entry.score += contribution

    # sorted() is stable, so equal scores stay in first-seen order.
    return sorted(scored.values(), key=lambda s: -s.score)


def suppress_near_duplicates(
    scored: Sequence[ScoredFrame],
    max_frames: int = MAX_RESULTS,
    min_gap_ms: int = MIN_GAP_MS,
) -> list[Frame]:
    """Greedily keep the best frames that are *min_gap_ms* apart per episode.

    Stops as soon as *max_frames* frames are kept.
    """
    kept: list[Frame] = []
    kept_by_episode: dict[str, list[int]] = {}

    for entry in scored:
        if len(kept) >= max_frames:
            break
        frame = entry.frame
        timestamps = kept_by_episode.setdefault(frame.episode, [])
        if any(abs(frame.timestamp - t) < min_gap_ms for t in timestamps):
            continue
        kept.append(frame)
        timestamps.append(frame.timestamp)

    return kept


def aggregate_results(
    result_lists: Iterable[object],
    max_frames: int = MAX_RESULTS,
) -> list[Frame]:
    """Return at most *max_frames* deduplicated frames, best first."""
    return suppress_near_duplicates(score_frames(result_lists), max_frames)
