import functools
from typing import Any

from async_lru import alru_cache
from loguru import logger
from pydantic import ValidationError

from reelfeed.core.config import settings
from reelfeed.models.video import CandidateVideo, VideoDetail
from reelfeed.services.catalog.client import CatalogClient


def _text(value: Any) -> str:
    """Flatten the backend's text shapes: plain string, {"text": ...} or {"runs": [...]}."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        if value.get("text"):
            return str(value["text"])
        runs = value.get("runs") or []
        return "".join(str(r.get("text", "")) for r in runs if isinstance(r, dict))
    return ""


def _first_thumbnail(raw: dict[str, Any]) -> str | None:
    thumbs = raw.get("thumbnails") or raw.get("thumbnail") or []
    if isinstance(thumbs, str):
        return thumbs
    if isinstance(thumbs, list) and thumbs and isinstance(thumbs[0], dict):
        return thumbs[0].get("url")
    return None


def to_candidate(raw: Any) -> CandidateVideo | None:
    """
    Normalize one backend video object into a CandidateVideo.

    Accepts both the backend's nested shape (author/view_count/published) and
    the flat camelCase shape. Returns None for non-video items.
    """
    if not isinstance(raw, dict):
        return None

    video_id = raw.get("id") or raw.get("video_id") or raw.get("videoId")
    if not video_id or not isinstance(video_id, str):
        return None

    author = raw.get("author") or raw.get("channel") or {}
    if not isinstance(author, dict):
        author = {"name": _text(author)}

    duration = raw.get("duration")
    if isinstance(duration, dict):
        duration = duration.get("text") or duration.get("seconds")

    try:
        return CandidateVideo(
            id=video_id,
            title=_text(raw.get("title")),
            channel_id=raw.get("channelId") or author.get("id") or raw.get("channel_id") or "",
            channel_name=raw.get("channelName") or _text(author.get("name")),
            description_snippet=_text(
                raw.get("descriptionSnippet") or raw.get("description_snippet") or raw.get("short_description")
            ),
            views=_text(raw.get("views")) or _text(raw.get("view_count")) or _text(raw.get("short_view_count")),
            uploaded_at=raw.get("uploadedAt") or _text(raw.get("published")),
            duration=duration,
            thumbnail=_first_thumbnail(raw),
        )
    except ValidationError as e:
        logger.debug(f"Skipping malformed catalog item {video_id}: {e}")
        return None


def to_short(raw: Any) -> CandidateVideo | None:
    """
    Normalize one channel-shorts item and flag it as short-form.

    Shorts arrive either as regular video objects or as lockups that keep the
    id under on_tap_endpoint.payload and the labels under overlay_metadata.
    """
    if not isinstance(raw, dict):
        return None

    flat = dict(raw)
    endpoint = raw.get("on_tap_endpoint")
    payload = endpoint.get("payload") if isinstance(endpoint, dict) else None
    if isinstance(payload, dict) and not (flat.get("id") or flat.get("video_id") or flat.get("videoId")):
        flat["id"] = payload.get("videoId")

    overlay = raw.get("overlay_metadata")
    if isinstance(overlay, dict):
        flat["title"] = flat.get("title") or overlay.get("primary_text")
        flat["views"] = flat.get("views") or overlay.get("secondary_text")

    video = to_candidate(flat)
    return video.model_copy(update={"is_short": True}) if video else None


def to_candidates(items: Any) -> list[CandidateVideo]:
    if not isinstance(items, list):
        return []
    videos = []
    for raw in items:
        video = to_candidate(raw)
        if video:
            videos.append(video)
    return videos


def _video_list(payload: Any) -> list[Any]:
    """Pull the video array out of a list or {"videos": [...]} response."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        videos = payload.get("videos")
        if isinstance(videos, list):
            return videos
    return []


class CatalogService:
    """
    Catalog provider backed by the HTTP catalog API.

    Lookups are cached in-process for a short time; failures propagate to the
    caller (the sourcer isolates them per fetch).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        channel_page: int = 1,
    ):
        self.client = CatalogClient(
            base_url=base_url or settings.CATALOG_API_URL,
            timeout=timeout or settings.CATALOG_TIMEOUT_SECONDS,
            max_retries=max_retries or settings.CATALOG_MAX_RETRIES,
        )
        self.channel_page = channel_page

        # Caches are per instance
        self.search = alru_cache(maxsize=1000, ttl=900)(self._search)
        self.channel_videos = alru_cache(maxsize=1000, ttl=1800)(self._channel_videos)
        self.channel_shorts = alru_cache(maxsize=1000, ttl=1800)(self._channel_shorts)
        self.trending = alru_cache(maxsize=4, ttl=3600)(self._trending)
        self.video_detail = alru_cache(maxsize=2000, ttl=3600)(self._video_detail)

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    async def _search(self, query: str, page: int = 1) -> list[CandidateVideo]:
        """Keyword search; supports "a OR b" queries."""
        data = await self.client.get("/api/search", params={"q": query, "page": page})
        return to_candidates(_video_list(data))

    async def _channel_videos(self, channel_id: str) -> list[CandidateVideo]:
        """Most recent uploads of a channel."""
        data = await self.client.get("/api/channel", params={"id": channel_id, "page": self.channel_page})
        return to_candidates(_video_list(data))

    async def _channel_shorts(self, channel_id: str) -> list[CandidateVideo]:
        """Short-form uploads of a channel; the backend returns a bare list."""
        data = await self.client.get("/api/channel-shorts", params={"id": channel_id})
        shorts = []
        for raw in _video_list(data):
            video = to_short(raw)
            if video:
                shorts.append(video)
        return shorts

    async def _trending(self) -> list[CandidateVideo]:
        """Global trending listing."""
        data = await self.client.get("/api/fvideo")
        return to_candidates(_video_list(data))

    async def recommended(self) -> list[CandidateVideo]:
        """Generic recommended listing; the backend serves it from the trending feed."""
        return await self.trending()

    async def _video_detail(self, video_id: str) -> VideoDetail:
        """Video details with its related-video feed."""
        data = await self.client.get("/api/video", params={"id": video_id})
        if not isinstance(data, dict):
            return VideoDetail(video=CandidateVideo(id=video_id))

        basic = data.get("basic_info") or {}
        video = to_candidate({"id": video_id, **basic}) if isinstance(basic, dict) else None

        related = list(data.get("watch_next_feed") or [])
        secondary = data.get("secondary_info") or {}
        if isinstance(secondary, dict):
            related.extend(secondary.get("watch_next_feed") or [])
        related.extend(data.get("related_videos") or [])

        seen: set[str] = set()
        related_videos = []
        for item in to_candidates(related):
            if item.id in seen or item.id == video_id:
                continue
            seen.add(item.id)
            related_videos.append(item)

        return VideoDetail(video=video or CandidateVideo(id=video_id), related_videos=related_videos)


@functools.lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    return CatalogService()
