from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CandidateVideo(BaseModel):
    """
    A video as returned by the catalog backend.

    Numeric fields (views, upload age, duration) are kept as the raw display
    text; the ranker parses them leniently.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = ""
    channel_id: str = Field(default="", alias="channelId")
    channel_name: str = Field(default="", alias="channelName")
    description_snippet: str = Field(default="", alias="descriptionSnippet")
    views: str = ""
    uploaded_at: str = Field(default="", alias="uploadedAt")
    duration: str = ""
    thumbnail: str | None = None
    # listed by the catalog as short-form even when no duration is given
    is_short: bool = Field(default=False, alias="isShort")

    @field_validator(
        "title", "channel_id", "channel_name", "description_snippet", "views", "uploaded_at", "duration", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @property
    def full_text(self) -> str:
        """Title, channel and description joined for keyword matching."""
        return f"{self.title} {self.channel_name} {self.description_snippet}"


class VideoDetail(BaseModel):
    video: CandidateVideo
    related_videos: list[CandidateVideo] = Field(default_factory=list, alias="relatedVideos")

    model_config = ConfigDict(populate_by_name=True)


class Channel(BaseModel):
    id: str
    name: str = ""
