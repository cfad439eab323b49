from dataclasses import dataclass, field


@dataclass(frozen=True)
class Frame:
    """A single still moment returned by the search service."""

    episode: str        # Frinkiac episode key, e.g. "S07E21"
    timestamp: int      # milliseconds from episode start

    @property
    def key(self) -> tuple[str, int]:
        return (self.episode, self.timestamp)


@dataclass
class ScoredFrame:
    """A Frame with its accumulated aggregation score."""

    frame: Frame
    score: float
    order: int          # first-seen position, breaks score ties


@dataclass
class Subtitle:
    """One subtitle line around a frame."""

    content: str
    start_ms: int
    end_ms: int


@dataclass
class EpisodeInfo:
    key: str
    title: str = ""
    season: int | None = None
    episode_number: int | None = None


@dataclass
class CaptionSet:
    """Every subtitle line covering a frame's context, plus episode metadata."""

    episode: EpisodeInfo
    subtitles: list[Subtitle] = field(default_factory=list)


@dataclass
class MemeCard:
    """A shortlisted frame paired with its display quote and rendered image URLs."""

    frame: Frame
    quote: str
    title: str
    meme_url: str       # renderer URL with the wrapped quote burned in
    image_url: str      # plain frame, used when the meme render fails
