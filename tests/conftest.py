import random

import pytest

from reelfeed.models.profile import KeywordWeightVector, UserProfile
from reelfeed.models.video import CandidateVideo, VideoDetail


def make_video(
    video_id: str,
    title: str = "",
    channel_id: str = "",
    channel_name: str = "",
    views: str = "1K views",
    uploaded_at: str = "3 weeks ago",
    duration: str = "10:00",
    description: str = "",
) -> CandidateVideo:
    return CandidateVideo(
        id=video_id,
        title=title or f"Video {video_id}",
        channel_id=channel_id or f"ch-{video_id}",
        channel_name=channel_name or f"Channel {video_id}",
        description_snippet=description,
        views=views,
        uploaded_at=uploaded_at,
        duration=duration,
    )


def make_profile(weights: dict[str, float]) -> UserProfile:
    return UserProfile.from_vector(KeywordWeightVector(values=dict(weights)))


class FakeCatalog:
    """In-memory catalog provider that records every call."""

    def __init__(
        self,
        search_results: dict[str, list[CandidateVideo]] | None = None,
        default_search: list[CandidateVideo] | None = None,
        channels: dict[str, list[CandidateVideo]] | None = None,
        shorts: dict[str, list[CandidateVideo]] | None = None,
        related: dict[str, list[CandidateVideo]] | None = None,
        recommended: list[CandidateVideo] | None = None,
        failing_queries: set[str] | None = None,
        fail_recommended: bool = False,
    ):
        self.search_results = search_results or {}
        self.default_search = default_search or []
        self.channels = channels or {}
        self.shorts = shorts or {}
        self.related = related or {}
        self.recommended_videos = recommended or []
        self.failing_queries = failing_queries or set()
        self.fail_recommended = fail_recommended
        self.calls: list[tuple] = []

    async def search(self, query: str, page: int = 1) -> list[CandidateVideo]:
        self.calls.append(("search", query, page))
        if query in self.failing_queries:
            raise RuntimeError(f"search failed for {query}")
        return list(self.search_results.get(query, self.default_search))

    async def channel_videos(self, channel_id: str) -> list[CandidateVideo]:
        self.calls.append(("channel", channel_id))
        if channel_id in self.failing_queries:
            raise RuntimeError(f"channel failed for {channel_id}")
        return list(self.channels.get(channel_id, []))

    async def channel_shorts(self, channel_id: str) -> list[CandidateVideo]:
        self.calls.append(("channel_shorts", channel_id))
        if channel_id in self.failing_queries:
            raise RuntimeError(f"shorts failed for {channel_id}")
        return list(self.shorts.get(channel_id, []))

    async def trending(self) -> list[CandidateVideo]:
        self.calls.append(("trending",))
        return list(self.recommended_videos)

    async def recommended(self) -> list[CandidateVideo]:
        self.calls.append(("recommended",))
        if self.fail_recommended:
            raise RuntimeError("recommended listing unavailable")
        return list(self.recommended_videos)

    async def video_detail(self, video_id: str) -> VideoDetail:
        self.calls.append(("video", video_id))
        if video_id in self.failing_queries:
            raise RuntimeError(f"detail failed for {video_id}")
        return VideoDetail(video=CandidateVideo(id=video_id), related_videos=self.related.get(video_id, []))

    def calls_of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def rng():
    return random.Random(1234)
