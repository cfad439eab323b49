"""Turn shortlisted frames and their quotes into displayable meme cards."""
from __future__ import annotations

from typing import TYPE_CHECKING

from mememachine.models import CaptionSet, Frame, MemeCard
from mememachine.text import fits_overlay, pick_quote

if TYPE_CHECKING:
    from mememachine.search.frinkiac import FrinkiacClient


def build_card(
    frame: Frame,
    caption_set: CaptionSet,
    quote: str,
    client: "FrinkiacClient",
) -> MemeCard | None:
    """Return a MemeCard, or None when there is no quote that fits the overlay.

    An empty *quote* falls back to the quote picked from *caption_set*.
    """
    if not quote:
        quote = pick_quote(caption_set)
    if not quote or not fits_overlay(quote):
        return None

    return MemeCard(
        frame=frame,
        quote=quote,
        title=caption_set.episode.title,
        meme_url=client.meme_url(frame, quote),
        image_url=client.image_url(frame),
    )
