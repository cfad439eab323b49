"""Frinkiac search: HTTP client, concurrent fan-out, and result aggregation."""
from mememachine.search.aggregate import aggregate_results, score_frames, suppress_near_duplicates
from mememachine.search.fanout import fetch_captions, search_all
from mememachine.search.frinkiac import FrinkiacClient

__all__ = [
    "aggregate_results",
    "score_frames",
    "suppress_near_duplicates",
    "fetch_captions",
    "search_all",
    "FrinkiacClient",
]
