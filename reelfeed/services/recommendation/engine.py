import random

from loguru import logger

from reelfeed.core.config import settings
from reelfeed.models.feed import FeedRequest, Pool, ScoringContext
from reelfeed.models.video import CandidateVideo
from reelfeed.services.catalog.provider import CatalogProvider
from reelfeed.services.profile.builder import ProfileBuilder
from reelfeed.services.profile.tokenizer import Tokenizer, default_tokenizer
from reelfeed.services.recommendation.constants import (
    RECENT_CHANNEL_LIMIT,
    RECENT_WATCH_LIMIT,
    SHORTS_MAX_DURATION_SECONDS,
)
from reelfeed.services.recommendation.mixer import FeedMixer
from reelfeed.services.recommendation.ranker import Ranker
from reelfeed.services.recommendation.sourcer import CandidateSourcer


class RecommendationEngine:
    """
    Main orchestration logic for the personalized feed.

    profile -> sourcing (concurrent) -> per-pool ranking -> ratio mixing -> cap.
    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        rng: random.Random | None = None,
        tokenizer: Tokenizer | None = None,
        max_items: int | None = None,
        discovery_ratio: float | None = None,
        jitter: float | None = None,
    ):
        self.catalog = catalog
        self.rng = rng or random.Random(settings.RANDOM_SEED)
        tokenizer = tokenizer or default_tokenizer

        self.max_items = max_items or settings.FEED_MAX_ITEMS
        self.profile_builder = ProfileBuilder(tokenizer)
        self.sourcer = CandidateSourcer(catalog, rng=self.rng)
        self.ranker = Ranker(tokenizer, rng=self.rng, jitter=jitter)
        self.mixer = FeedMixer(discovery_ratio or settings.DISCOVERY_RATIO)

    async def get_feed(self, request: FeedRequest, shorts: bool = False) -> list[CandidateVideo]:
        """
        Build one feed page; an empty list means nothing is available right now.

        With shorts=True channels are sourced from their shorts shelf and every
        pool is restricted to short-form videos.
        """
        max_duration_seconds = SHORTS_MAX_DURATION_SECONDS if shorts else None
        kind = "shorts feed" if shorts else "feed"
        logger.info(
            f"Building {kind} page {request.page} "
            f"(searches={len(request.search_history)}, watched={len(request.watch_history)}, "
            f"subscriptions={len(request.subscribed_channels)})"
        )

        # 1. Interest profile
        profile = self.profile_builder.build_profile(
            request.search_history, request.watch_history, request.subscribed_channels
        )

        # 2. Candidate pools
        pools = await self.sourcer.source(
            profile,
            request.watch_history,
            request.subscribed_channels,
            preferred_genres=request.preferred_genres,
            preferred_channels=request.preferred_channels,
            page=request.page,
            shorts=shorts,
        )

        # 3. Rank each pool in its own mode
        ranked = {}
        for mode, pool in ((Pool.DISCOVERY, pools.discovery), (Pool.COMFORT, pools.comfort)):
            context = ScoringContext.for_pool(
                mode,
                request.preferences,
                request.watch_history,
                recent_watch_limit=RECENT_WATCH_LIMIT,
                recent_channel_limit=RECENT_CHANNEL_LIMIT,
                max_duration_seconds=max_duration_seconds,
            )
            ranked[mode] = self.ranker.rank(pool, profile, context)

        # 4. Mix and cap
        feed = self.mixer.mix(ranked[Pool.DISCOVERY], ranked[Pool.COMFORT])[: self.max_items]

        if not feed:
            logger.info("No recommendations available for this request")
        else:
            logger.info(
                f"Feed ready: {len(feed)} videos "
                f"(discovery={len(ranked[Pool.DISCOVERY])}, comfort={len(ranked[Pool.COMFORT])})"
            )
        return feed

    async def get_shorts_feed(self, request: FeedRequest) -> list[CandidateVideo]:
        """Same pipeline restricted to short-form videos."""
        return await self.get_feed(request, shorts=True)

    async def get_legacy_feed(self) -> list[CandidateVideo]:
        """Unpersonalized feed: the recommended listing, shuffled."""
        try:
            videos = list(await self.catalog.recommended())
        except Exception as e:
            logger.warning(f"Failed to fetch legacy recommendations: {e}")
            return []
        self.rng.shuffle(videos)
        return videos[: self.max_items]
