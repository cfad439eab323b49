"""Runtime configuration read from environment variables.

Every getter reads the environment at call time so tests (and long-lived
shells) can change a variable without re-importing the package.
"""
import os

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_FRINKIAC_URL = "https://frinkiac.com"
DEFAULT_TIMEOUT_S = 15.0

# Pipeline constants
MAX_RESULTS = 12            # cards requested per search
MIN_GAP_MS = 30_000         # same-episode frames closer than this are one joke
WRAP_WIDTH = 26             # renderer clips lines wider than this
MAX_OVERLAY_LINES = 4       # more lines overflow the image
QUOTE_LIMIT = 130
MAX_QUERIES = 5
SEARCH_RESULT_LIMIT = 20
MAX_WORKERS = 10


def get_api_key() -> str | None:
    """Return ANTHROPIC_API_KEY, or None when text generation is not configured."""
    value = os.environ.get("ANTHROPIC_API_KEY", "").strip()
    return value or None


def get_model_name() -> str:
    return os.environ.get("MEMEMACHINE_MODEL", "").strip() or DEFAULT_MODEL


def get_frinkiac_url() -> str:
    """Return the search/caption/renderer base URL without a trailing slash."""
    value = os.environ.get("MEMEMACHINE_FRINKIAC_URL", "").strip() or DEFAULT_FRINKIAC_URL
    return value.rstrip("/")


def get_timeout_s() -> float:
    """Return the per-request timeout. Falls back to the default on junk values."""
    raw = os.environ.get("MEMEMACHINE_TIMEOUT_S")
    if raw is None:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_S
    return value if value > 0 else DEFAULT_TIMEOUT_S
