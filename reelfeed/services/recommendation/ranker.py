import math
import random
from collections import defaultdict
from typing import NamedTuple

from loguru import logger

from reelfeed.core.config import settings
from reelfeed.models.feed import Pool, ScoringContext
from reelfeed.models.profile import UserProfile
from reelfeed.models.video import CandidateVideo
from reelfeed.services.profile.similarity import cosine_similarity
from reelfeed.services.profile.tokenizer import Tokenizer, default_tokenizer
from reelfeed.services.recommendation.constants import (
    CHANNEL_AFFINITY_BONUS,
    COMFORT_FRESHNESS_WEIGHT,
    COMFORT_POPULARITY_WEIGHT,
    COMFORT_RELEVANCE_WEIGHT,
    COMFORT_VELOCITY_WEIGHT,
    DISCOVERY_FRESHNESS_WEIGHT,
    DISCOVERY_OFF_TOPIC_SCORE_CAP,
    DISCOVERY_POPULARITY_WEIGHT,
    DISCOVERY_RELEVANCE_FLOOR,
    DISCOVERY_RELEVANCE_WEIGHT,
    DISCOVERY_VELOCITY_WEIGHT,
    FRESH_BOOST_1_DAY,
    FRESH_BOOST_3_DAYS,
    HISTORY_PENALTY_COMFORT,
    HISTORY_PENALTY_DISCOVERY,
    MAX_PER_CHANNEL_COMFORT,
    MAX_PER_CHANNEL_DISCOVERY,
    NEGATIVE_KEYWORD_PENALTY,
    RELEVANCE_SCALE,
    VELOCITY_MIN_DAYS,
)
from reelfeed.services.recommendation.parsing import log_scale, parse_duration, parse_upload_age, parse_views


class ScoredCandidate(NamedTuple):
    video: CandidateVideo
    score: float


class VideoSignals(NamedTuple):
    relevance: float
    popularity: float
    velocity: float
    freshness: float
    days_ago: float


def freshness_score(days_ago: float) -> float:
    """Stepped boost for new uploads, decaying logarithmically after a week."""
    if days_ago <= 1:
        return 15.0
    if days_ago <= 3:
        return 10.0
    if days_ago <= 7:
        return 5.0
    return max(0.0, 5.0 - math.log2(days_ago))


def fresh_boost(days_ago: float) -> float:
    if days_ago <= 1:
        return FRESH_BOOST_1_DAY
    if days_ago <= 3:
        return FRESH_BOOST_3_DAYS
    return 1.0


def soft_cap(score: float, cap: float) -> float:
    """Monotonic squash of a non-negative score into [0, cap)."""
    if score <= 0:
        return 0.0
    return cap * score / (score + cap)


def channel_key(video: CandidateVideo) -> str:
    """Diversity bucket; videos without any channel info are never capped together."""
    return video.channel_id or video.channel_name or f"video:{video.id}"


class Ranker:
    """
    Scores, filters and diversifies one candidate pool against the profile.

    Randomness (score jitter) comes from the injected random source only.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        rng: random.Random | None = None,
        jitter: float | None = None,
    ):
        self.tokenizer = tokenizer or default_tokenizer
        self.rng = rng or random.Random(settings.RANDOM_SEED)
        self.jitter = settings.SCORE_JITTER if jitter is None else max(0.0, jitter)

    def rank(
        self, videos: list[CandidateVideo], profile: UserProfile, context: ScoringContext
    ) -> list[CandidateVideo]:
        scored = []
        for video in videos:
            if not self.passes_filters(video, context):
                continue
            scored.append(ScoredCandidate(video, self.score(video, profile, context)))

        scored.sort(key=lambda x: x.score, reverse=True)
        cap = MAX_PER_CHANNEL_DISCOVERY if context.mode == Pool.DISCOVERY else MAX_PER_CHANNEL_COMFORT
        ranked = self.apply_diversity_cap(scored, cap)

        logger.debug(
            f"Ranked {context.mode.value} pool: {len(videos)} in, {len(scored)} scored, {len(ranked)} after diversity"
        )
        return ranked

    @staticmethod
    def passes_filters(video: CandidateVideo, context: ScoringContext) -> bool:
        """Hard exclusions: NG keywords/channels, hidden videos, over-long videos."""
        if not video.id:
            return False
        if video.id in context.hidden_video_ids:
            return False
        if video.channel_id and video.channel_id in context.ng_channels:
            return False

        if context.ng_keywords:
            full_text = video.full_text.lower()
            if any(ng.lower() in full_text for ng in context.ng_keywords):
                return False

        if context.max_duration_seconds is not None:
            seconds = parse_duration(video.duration)
            if seconds > context.max_duration_seconds:
                return False
            # unknown duration (0) fits only when the catalog listed it as a short
            if seconds <= 0 and not video.is_short:
                return False

        return True

    def signals(self, video: CandidateVideo, tokens: set[str], profile: UserProfile) -> VideoSignals:
        views = parse_views(video.views)
        days_ago = parse_upload_age(video.uploaded_at)
        velocity = views / max(days_ago, VELOCITY_MIN_DAYS)
        return VideoSignals(
            relevance=cosine_similarity(profile, tokens),
            popularity=log_scale(views),
            velocity=log_scale(velocity),
            freshness=freshness_score(days_ago),
            days_ago=days_ago,
        )

    def score(self, video: CandidateVideo, profile: UserProfile, context: ScoringContext) -> float:
        tokens = self.tokenizer.tokenize(video.full_text)
        sig = self.signals(video, tokens, profile)
        relevance = sig.relevance * RELEVANCE_SCALE

        if context.mode == Pool.DISCOVERY:
            score = (
                relevance * DISCOVERY_RELEVANCE_WEIGHT
                + sig.popularity * DISCOVERY_POPULARITY_WEIGHT
                + sig.velocity * DISCOVERY_VELOCITY_WEIGHT
                + sig.freshness * DISCOVERY_FRESHNESS_WEIGHT
            ) * fresh_boost(sig.days_ago)
            # Off-topic viral content must not win on popularity alone.
            # Squashed below the cap so order among off-topic videos survives.
            if not profile.is_empty and sig.relevance < DISCOVERY_RELEVANCE_FLOOR:
                score = soft_cap(score, DISCOVERY_OFF_TOPIC_SCORE_CAP)
        else:
            score = (
                relevance * COMFORT_RELEVANCE_WEIGHT
                + sig.popularity * COMFORT_POPULARITY_WEIGHT
                + sig.velocity * COMFORT_VELOCITY_WEIGHT
                + sig.freshness * COMFORT_FRESHNESS_WEIGHT
            )
            if video.channel_id and video.channel_id in context.recent_channel_ids:
                score += CHANNEL_AFFINITY_BONUS

        if video.id in context.recent_watch_ids:
            score *= HISTORY_PENALTY_DISCOVERY if context.mode == Pool.DISCOVERY else HISTORY_PENALTY_COMFORT

        if context.negative_keywords:
            suppression = sum(context.negative_keywords.get(t, 0) for t in tokens)
            if suppression > 0:
                score /= 1.0 + NEGATIVE_KEYWORD_PENALTY * suppression

        if self.jitter > 0:
            score *= 1.0 + self.rng.uniform(-self.jitter, self.jitter)

        return score

    @staticmethod
    def apply_diversity_cap(scored: list[ScoredCandidate], max_per_channel: int) -> list[CandidateVideo]:
        """Walk in score order, admitting at most max_per_channel videos per channel."""
        result = []
        channel_counts: dict[str, int] = defaultdict(int)
        for candidate in scored:
            key = channel_key(candidate.video)
            if channel_counts[key] >= max_per_channel:
                continue
            channel_counts[key] += 1
            result.append(candidate.video)
        return result
