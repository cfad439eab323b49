"""Pydantic models for the Frinkiac search and caption JSON payloads."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mememachine.models import CaptionSet, EpisodeInfo, Frame, Subtitle


class _FrinkiacModel(BaseModel):
    # Frinkiac sends PascalCase keys and a lot of fields we do not use.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FrameRecord(_FrinkiacModel):
    id: Optional[int] = Field(default=None, alias="Id")
    episode: str = Field(alias="Episode", min_length=1)
    timestamp: int = Field(alias="Timestamp", ge=0)

    def to_frame(self) -> Frame:
        return Frame(episode=self.episode, timestamp=self.timestamp)


class EpisodeRecord(_FrinkiacModel):
    key: str = Field(alias="Key")
    title: str = Field(default="", alias="Title")
    season: Optional[int] = Field(default=None, alias="Season")
    episode_number: Optional[int] = Field(default=None, alias="EpisodeNumber")


class SubtitleRecord(_FrinkiacModel):
    content: str = Field(default="", alias="Content")
    start_ms: int = Field(default=0, alias="StartTimestamp")
    end_ms: int = Field(default=0, alias="EndTimestamp")


class CaptionRecord(_FrinkiacModel):
    episode: Optional[EpisodeRecord] = Field(default=None, alias="Episode")
    subtitles: list[SubtitleRecord] = Field(default_factory=list, alias="Subtitles")

    def to_caption_set(self, fallback_episode: str) -> CaptionSet:
        if self.episode is not None:
            info = EpisodeInfo(
                key=self.episode.key,
                title=self.episode.title,
                season=self.episode.season,
                episode_number=self.episode.episode_number,
            )
        else:
            info = EpisodeInfo(key=fallback_episode)
        return CaptionSet(
            episode=info,
            subtitles=[
                Subtitle(content=s.content, start_ms=s.start_ms, end_ms=s.end_ms)
                for s in self.subtitles
            ],
        )
