import math

from loguru import logger

from reelfeed.models.profile import KeywordWeightVector, UserProfile
from reelfeed.models.video import CandidateVideo, Channel
from reelfeed.services.profile.constants import (
    SEARCH_DECAY,
    SEARCH_HISTORY_LIMIT,
    SEARCH_WEIGHT,
    SUBSCRIPTION_WEIGHT,
    WATCH_CHANNEL_MULTIPLIER,
    WATCH_DECAY,
    WATCH_HISTORY_LIMIT,
    WATCH_WEIGHT,
)
from reelfeed.services.profile.tokenizer import Tokenizer, default_tokenizer


def decayed_weight(base: float, rank: int, decay: float) -> float:
    """Exponential recency decay: base * e^(-rank/decay)."""
    return base * math.exp(-rank / decay)


class ProfileBuilder:
    """
    Builds the interest vector using additive accumulation.

    Design principles:
    - Pure accumulation: weight[token] += w
    - Every token of one text gets the same weight
    - Recent signals count more (exponential decay by rank)
    - Search > watched video > subscription at rank 0
    """

    def __init__(self, tokenizer: Tokenizer | None = None):
        self.tokenizer = tokenizer or default_tokenizer

    def build_profile(
        self,
        search_history: list[str],
        watch_history: list[CandidateVideo],
        subscribed_channels: list[Channel],
    ) -> UserProfile:
        """
        Build the profile from raw history.

        Args:
            search_history: Search terms, most recent first
            watch_history: Watched videos, most recent first
            subscribed_channels: Subscribed channels (order irrelevant)

        Returns:
            Frozen UserProfile with its magnitude precomputed
        """
        vector = KeywordWeightVector()

        for rank, term in enumerate(search_history[:SEARCH_HISTORY_LIMIT]):
            weight = decayed_weight(SEARCH_WEIGHT, rank, SEARCH_DECAY)
            vector.add_all(self.tokenizer.tokenize(term), weight)

        for rank, video in enumerate(watch_history[:WATCH_HISTORY_LIMIT]):
            weight = decayed_weight(WATCH_WEIGHT, rank, WATCH_DECAY)
            vector.add_all(self.tokenizer.tokenize(video.title), weight)
            vector.add_all(self.tokenizer.tokenize(video.channel_name), weight * WATCH_CHANNEL_MULTIPLIER)

        for channel in subscribed_channels:
            vector.add_all(self.tokenizer.tokenize(channel.name), SUBSCRIPTION_WEIGHT)

        profile = UserProfile.from_vector(vector)
        logger.debug(f"Built profile with {len(vector)} keywords (magnitude={profile.magnitude:.2f})")
        return profile
