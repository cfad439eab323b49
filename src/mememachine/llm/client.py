"""Anthropic Messages API client used for query expansion and punchline selection."""
import json
import logging
import re
from typing import Optional

import requests

from mememachine.config import get_api_key, get_model_name, get_timeout_s
from mememachine.errors import UpstreamError, UpstreamFormatError

_logger = logging.getLogger("mememachine")

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

# First bracketed span, non-greedy, across newlines.
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*?\]")


class TextClient:
    """Single-turn text generation over the Anthropic Messages API.

    Usage::

        client = TextClient.from_env()
        if client is not None:
            text = client.complete("Say hi", max_tokens=32)

    """

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout_s: float | None = None,
        url: str = ANTHROPIC_MESSAGES_URL,
    ) -> None:
        self.api_key = api_key
        self.model = model or get_model_name()
        self.timeout_s = timeout_s if timeout_s is not None else get_timeout_s()
        self.url = url

    @classmethod
    def from_env(cls) -> Optional["TextClient"]:
        """Build a client from ANTHROPIC_API_KEY, or return None if it is unset."""
        api_key = get_api_key()
        if api_key is None:
            return None
        return cls(api_key)

    def complete(self, prompt: str, max_tokens: int = 256) -> str:
        """Send *prompt* as one user message and return the first text block.

        Raises UpstreamError on network failure or non-2xx status, and
        UpstreamFormatError when the response has no text content.
        """
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        _logger.debug("POST %s model=%s max_tokens=%d", self.url, self.model, max_tokens)
        try:
            r = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout_s)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamError("text generation", str(exc)) from exc

        try:
            return r.json()["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise UpstreamFormatError("text generation", f"no text content: {exc!r}") from exc


def extract_json_array(text: str) -> list:
    """Parse the first bracketed JSON array embedded in free text.

    Raises UpstreamFormatError if there is no array or it does not parse.
    """
    match = _JSON_ARRAY_RE.search(text)
    if match is None:
        raise UpstreamFormatError("text generation", "no JSON array in response")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise UpstreamFormatError("text generation", f"invalid JSON array: {exc}") from exc
