from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from reelfeed.models.video import CandidateVideo, Channel


class Pool(str, Enum):
    DISCOVERY = "discovery"
    COMFORT = "comfort"


class PreferenceSnapshot(BaseModel):
    """Read-only view of the viewer's preference store, sent with each request."""

    model_config = ConfigDict(populate_by_name=True)

    ng_keywords: list[str] = Field(default_factory=list, alias="ngKeywords")
    ng_channels: set[str] = Field(default_factory=set, alias="ngChannels")
    hidden_video_ids: set[str] = Field(default_factory=set, alias="hiddenVideoIds")
    # keyword -> suppression count, accumulated from hidden videos
    negative_keywords: dict[str, int] = Field(default_factory=dict, alias="negativeKeywords")


class ScoringContext(BaseModel):
    """Filters and signals the ranker applies to a single pool."""

    mode: Pool = Pool.DISCOVERY
    ng_keywords: list[str] = Field(default_factory=list)
    ng_channels: set[str] = Field(default_factory=set)
    recent_watch_ids: set[str] = Field(default_factory=set)
    recent_channel_ids: set[str] = Field(default_factory=set)
    hidden_video_ids: set[str] = Field(default_factory=set)
    negative_keywords: dict[str, int] = Field(default_factory=dict)
    # set for the shorts feed; videos with unknown duration are then excluded
    max_duration_seconds: int | None = None

    @classmethod
    def for_pool(
        cls,
        mode: Pool,
        preferences: PreferenceSnapshot,
        watch_history: list[CandidateVideo],
        recent_watch_limit: int = 100,
        recent_channel_limit: int = 20,
        max_duration_seconds: int | None = None,
    ) -> "ScoringContext":
        recent = watch_history[:recent_watch_limit]
        return cls(
            mode=mode,
            ng_keywords=[k for k in preferences.ng_keywords if k and k.strip()],
            ng_channels=set(preferences.ng_channels),
            recent_watch_ids={v.id for v in recent},
            recent_channel_ids={v.channel_id for v in watch_history[:recent_channel_limit] if v.channel_id},
            hidden_video_ids=set(preferences.hidden_video_ids),
            negative_keywords=dict(preferences.negative_keywords),
            max_duration_seconds=max_duration_seconds,
        )


class FeedRequest(BaseModel):
    """Everything the engine needs to build one feed page."""

    model_config = ConfigDict(populate_by_name=True)

    search_history: list[str] = Field(default_factory=list, alias="searchHistory")
    watch_history: list[CandidateVideo] = Field(default_factory=list, alias="watchHistory")
    subscribed_channels: list[Channel] = Field(default_factory=list, alias="subscribedChannels")
    preferred_genres: list[str] = Field(default_factory=list, alias="preferredGenres")
    preferred_channels: list[str] = Field(default_factory=list, alias="preferredChannels")
    preferences: PreferenceSnapshot = Field(default_factory=PreferenceSnapshot)
    page: int = Field(default=1, ge=1)


class FeedResponse(BaseModel):
    videos: list[CandidateVideo] = Field(default_factory=list)
    count: int = 0
