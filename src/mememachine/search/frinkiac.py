"""Frinkiac HTTP client: frame search, caption lookup, renderer URLs, image download."""

import logging
from pathlib import Path
from urllib.parse import quote

import requests
from pydantic import ValidationError

from mememachine.config import SEARCH_RESULT_LIMIT, get_frinkiac_url, get_timeout_s
from mememachine.errors import (
    ImageSaveError,
    InvalidImageUrlError,
    UpstreamError,
    UpstreamFormatError,
)
from mememachine.models import CaptionSet, Frame
from mememachine.search.schema import CaptionRecord, FrameRecord
from mememachine.text import wrap

_logger = logging.getLogger("mememachine")

# Frinkiac rejects requests without a browser-like User-Agent.
_HEADERS = {"User-Agent": "Mozilla/5.0"}


class FrinkiacClient:
    """Thin wrapper over the Frinkiac search, caption and image endpoints.

    Methods raise UpstreamError on network failure or non-2xx status and
    UpstreamFormatError on bodies that are not the expected JSON. Callers
    decide the fallback.
    """

    def __init__(self, base_url: str | None = None, timeout_s: float | None = None) -> None:
        self.base_url = (base_url or get_frinkiac_url()).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else get_timeout_s()

    def _get_json(self, service: str, path: str, params: dict) -> object:
        url = f"{self.base_url}{path}"
        _logger.debug("GET %s params=%s", url, params)
        try:
            r = requests.get(url, params=params, headers=_HEADERS, timeout=self.timeout_s)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamError(service, str(exc)) from exc
        try:
            return r.json()
        except ValueError as exc:
            raise UpstreamFormatError(service, f"body is not JSON: {exc}") from exc

    def search(self, query: str) -> list[Frame | None]:
        """Return frames matching *query*, best first.

        A non-list body counts as no results. At most SEARCH_RESULT_LIMIT
        records are kept. A record missing an episode or timestamp becomes
        ``None`` so it still holds its rank slot when results are scored.
        """
        data = self._get_json("search", "/api/search", {"q": query})
        if not isinstance(data, list):
            return []

        frames: list[Frame | None] = []
        for raw in data[:SEARCH_RESULT_LIMIT]:
            try:
                frames.append(FrameRecord.model_validate(raw).to_frame())
            except ValidationError:
                _logger.debug("Malformed search record: %r", raw)
                frames.append(None)
        return frames

    def caption(self, frame: Frame) -> CaptionSet:
        """Return the subtitle lines and episode metadata around *frame*."""
        data = self._get_json(
            "caption", "/api/caption", {"e": frame.episode, "t": str(frame.timestamp)}
        )
        try:
            record = CaptionRecord.model_validate(data)
        except ValidationError as exc:
            raise UpstreamFormatError("caption", str(exc)) from exc
        return record.to_caption_set(frame.episode)

    def meme_url(self, frame: Frame, text: str) -> str:
        """Renderer URL for *frame* with *text* wrapped and burned in."""
        lines = quote(wrap(text), safe="")
        return f"{self.base_url}/meme/{frame.episode}/{frame.timestamp}.jpg?lines={lines}"

    def image_url(self, frame: Frame) -> str:
        """URL of the plain still, without overlay text."""
        return f"{self.base_url}/img/{frame.episode}/{frame.timestamp}/medium.jpg"

    def download_image(self, url: str, dest: Path) -> Path:
        """Download a rendered image hosted on this Frinkiac instance to *dest*.

        The file is written to a ``.tmp`` sibling and renamed into place, so a
        failed download never leaves a partial image behind.
        """
        allowed_prefix = f"{self.base_url}/"
        if not url.startswith(allowed_prefix):
            raise InvalidImageUrlError(url, allowed_prefix)

        tmp_path = dest.with_name(dest.name + ".tmp")
        try:
            with requests.get(url, headers=_HEADERS, stream=True, timeout=self.timeout_s) as r:
                r.raise_for_status()
                with open(tmp_path, "wb") as f:
                    for chunk in r.iter_content(chunk_size=8192):
                        if chunk:
                            f.write(chunk)
            tmp_path.replace(dest)
        except requests.RequestException as exc:
            tmp_path.unlink(missing_ok=True)
            raise UpstreamError("image", str(exc)) from exc
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise ImageSaveError(str(dest), str(exc)) from exc
        return dest
