from typing import Protocol

from reelfeed.models.video import CandidateVideo, VideoDetail


class CatalogProvider(Protocol):
    """
    Video catalog lookups the recommendation engine depends on.

    Implementations own timeouts and retries; the engine treats any exception
    raised here as an empty result.
    """

    async def search(self, query: str, page: int = 1) -> list[CandidateVideo]: ...

    async def channel_videos(self, channel_id: str) -> list[CandidateVideo]: ...

    async def channel_shorts(self, channel_id: str) -> list[CandidateVideo]: ...

    async def trending(self) -> list[CandidateVideo]: ...

    async def recommended(self) -> list[CandidateVideo]: ...

    async def video_detail(self, video_id: str) -> VideoDetail: ...
