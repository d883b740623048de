import asyncio
import random
from collections.abc import Awaitable
from typing import NamedTuple

from loguru import logger

from reelfeed.core.config import settings
from reelfeed.models.profile import UserProfile
from reelfeed.models.video import CandidateVideo, Channel
from reelfeed.services.catalog.provider import CatalogProvider
from reelfeed.services.recommendation.constants import (
    CHANNEL_VIDEOS_LIMIT,
    DISCOVERY_KEYWORD_LIMIT,
    DISCOVERY_QUERY_CHUNK,
    PREFERRED_CHANNEL_LIMIT,
    RELATED_SOURCE_WINDOW,
    SUBSCRIPTION_SAMPLE_SIZE,
    TRENDING_QUERY,
)


class SourcedPools(NamedTuple):
    discovery: list[CandidateVideo]
    comfort: list[CandidateVideo]


def chunk(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def dedupe_by_id(videos: list[CandidateVideo]) -> list[CandidateVideo]:
    """Keep the first occurrence of each id, preserving order."""
    seen: set[str] = set()
    unique = []
    for video in videos:
        if video.id in seen:
            continue
        seen.add(video.id)
        unique.append(video)
    return unique


class CandidateSourcer:
    """
    Gathers the two raw candidate pools from the catalog.

    Discovery: OR-searches over the profile's top keywords plus a trending query.
    Comfort: related videos of a recent watch and uploads of subscribed channels
    (their shorts shelf when sourcing the shorts feed).

    Every fetch of a request runs concurrently. A failed fetch only loses its
    own results.
    """

    def __init__(self, catalog: CatalogProvider, rng: random.Random | None = None):
        self.catalog = catalog
        self.rng = rng or random.Random(settings.RANDOM_SEED)

    @staticmethod
    def build_discovery_queries(profile: UserProfile, preferred_genres: list[str]) -> list[str]:
        """Preferred genres first, then profile keywords by weight; top N chunked into OR-queries."""
        genres = [g.strip().lower() for g in preferred_genres if g and g.strip()]
        priority = list(dict.fromkeys(genres + profile.get_top_keywords(DISCOVERY_KEYWORD_LIMIT)))
        top = priority[:DISCOVERY_KEYWORD_LIMIT]
        return [" OR ".join(group) for group in chunk(top, DISCOVERY_QUERY_CHUNK)]

    async def source(
        self,
        profile: UserProfile,
        watch_history: list[CandidateVideo],
        subscribed_channels: list[Channel],
        preferred_genres: list[str] | None = None,
        preferred_channels: list[str] | None = None,
        page: int = 1,
        shorts: bool = False,
    ) -> SourcedPools:
        discovery_tasks: list[Awaitable[list[CandidateVideo]]] = []
        comfort_tasks: list[Awaitable[list[CandidateVideo]]] = []

        # Discovery: new videos matching old interests
        queries = self.build_discovery_queries(profile, preferred_genres or [])
        for query in queries:
            discovery_tasks.append(self._safe_fetch(f"search '{query}'", self.catalog.search(query, page)))

        # Comfort: the "rabbit hole" from a recent watch
        if watch_history:
            seed = self.rng.choice(watch_history[:RELATED_SOURCE_WINDOW])
            comfort_tasks.append(self._safe_fetch(f"related to {seed.id}", self._related(seed.id)))

        # Comfort: a few subscriptions, plus every explicitly preferred channel
        channel_ids = self._pick_channels(subscribed_channels, preferred_channels or [])
        for channel_id in channel_ids:
            comfort_tasks.append(
                self._safe_fetch(f"channel {channel_id}", self._channel_uploads(channel_id, shorts=shorts))
            )

        cold_start = not discovery_tasks and not comfort_tasks

        # Broad freshness: trending on the first page, generic listing deeper in
        if page <= 1:
            discovery_tasks.append(self._safe_fetch("trending search", self.catalog.search(TRENDING_QUERY, 1)))
        if cold_start or page > 1:
            if cold_start:
                logger.info("No profile signals; falling back to the recommended listing")
            discovery_tasks.append(self._safe_fetch("recommended", self.catalog.recommended()))

        logger.debug(f"Sourcing page {page}: {len(discovery_tasks)} discovery / {len(comfort_tasks)} comfort fetches")
        discovery_batches, comfort_batches = await asyncio.gather(
            asyncio.gather(*discovery_tasks),
            asyncio.gather(*comfort_tasks),
        )

        discovery = dedupe_by_id([v for batch in discovery_batches for v in batch])
        discovery_ids = {v.id for v in discovery}
        # Discovery wins collisions
        comfort = [v for v in dedupe_by_id([v for batch in comfort_batches for v in batch]) if v.id not in discovery_ids]

        logger.debug(f"Sourced {len(discovery)} discovery and {len(comfort)} comfort candidates")
        return SourcedPools(discovery=discovery, comfort=comfort)

    def _pick_channels(self, subscribed: list[Channel], preferred: list[str]) -> list[str]:
        sample_size = min(SUBSCRIPTION_SAMPLE_SIZE, len(subscribed))
        sampled = [c.id for c in self.rng.sample(subscribed, sample_size) if c.id]
        preferred_ids = [p for p in preferred if p][:PREFERRED_CHANNEL_LIMIT]
        return list(dict.fromkeys(sampled + preferred_ids))

    async def _related(self, video_id: str) -> list[CandidateVideo]:
        detail = await self.catalog.video_detail(video_id)
        return list(detail.related_videos)

    async def _channel_uploads(self, channel_id: str, shorts: bool = False) -> list[CandidateVideo]:
        if shorts:
            videos = await self.catalog.channel_shorts(channel_id)
        else:
            videos = await self.catalog.channel_videos(channel_id)
        return list(videos[:CHANNEL_VIDEOS_LIMIT])

    @staticmethod
    async def _safe_fetch(label: str, fetch: Awaitable[list[CandidateVideo]]) -> list[CandidateVideo]:
        try:
            return list(await fetch or [])
        except Exception as e:
            logger.warning(f"Catalog fetch failed ({label}): {e}")
            return []
