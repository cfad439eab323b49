"""Homer's Meme Machine — scenario-driven Simpsons screenshot search."""
from mememachine.pipeline import SearchReport, run_search

__all__ = ["SearchReport", "run_search"]
