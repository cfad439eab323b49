"""Text-generation helpers: query expansion and punchline selection."""
from mememachine.llm.client import TextClient, extract_json_array
from mememachine.llm.punchlines import select_punchlines
from mememachine.llm.queries import expand_scenario

__all__ = [
    "TextClient",
    "extract_json_array",
    "select_punchlines",
    "expand_scenario",
]
