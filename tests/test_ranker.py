# tests/test_ranker.py
import math
import random

import pytest

from reelfeed.models.feed import Pool, PreferenceSnapshot, ScoringContext
from reelfeed.models.video import CandidateVideo
from reelfeed.services.recommendation.constants import (
    CHANNEL_AFFINITY_BONUS,
    DISCOVERY_OFF_TOPIC_SCORE_CAP,
    HISTORY_PENALTY_COMFORT,
    HISTORY_PENALTY_DISCOVERY,
    MAX_PER_CHANNEL_COMFORT,
    MAX_PER_CHANNEL_DISCOVERY,
)
from reelfeed.services.recommendation.ranker import Ranker, channel_key, freshness_score
from tests.conftest import make_profile, make_video


@pytest.fixture
def ranker():
    return Ranker(jitter=0)


@pytest.fixture
def profile():
    return make_profile({"ramen": 8.0, "tokyo": 4.0})


def discovery(**kwargs) -> ScoringContext:
    return ScoringContext(mode=Pool.DISCOVERY, **kwargs)


def comfort(**kwargs) -> ScoringContext:
    return ScoringContext(mode=Pool.COMFORT, **kwargs)


class TestFilters:
    def test_ng_keyword_is_case_insensitive(self, ranker, profile):
        videos = [make_video("a", title="Best RAMEN in Tokyo"), make_video("b", title="Tokyo night walk")]
        ranked = ranker.rank(videos, profile, discovery(ng_keywords=["ramen"]))
        assert [v.id for v in ranked] == ["b"]

    def test_ng_keyword_matches_channel_and_description(self, ranker, profile):
        videos = [
            make_video("a", channel_name="Spoiler Central"),
            make_video("b", description="full spoiler inside"),
            make_video("c"),
        ]
        ranked = ranker.rank(videos, profile, comfort(ng_keywords=["Spoiler"]))
        assert [v.id for v in ranked] == ["c"]

    def test_ng_channel_and_hidden_are_excluded(self, ranker, profile):
        videos = [make_video("a", channel_id="bad"), make_video("b"), make_video("c")]
        context = discovery(ng_channels={"bad"}, hidden_video_ids={"b"})
        assert [v.id for v in ranker.rank(videos, profile, context)] == ["c"]

    def test_duration_limit_drops_long_and_unknown(self, ranker, profile):
        videos = [
            make_video("short", duration="0:45"),
            make_video("edge", duration="1:00"),
            make_video("long", duration="10:00"),
            make_video("live", duration=""),
        ]
        ranked = ranker.rank(videos, profile, discovery(max_duration_seconds=60))
        assert {v.id for v in ranked} == {"short", "edge"}

    def test_listed_short_with_unknown_duration_fits(self, ranker, profile):
        videos = [
            CandidateVideo(id="listed", title="ramen", is_short=True),
            CandidateVideo(id="listed-long", title="ramen", duration="5:00", is_short=True),
        ]
        ranked = ranker.rank(videos, profile, discovery(max_duration_seconds=60))
        assert [v.id for v in ranked] == ["listed"]

    def test_no_duration_limit_keeps_unknown(self, ranker, profile):
        ranked = ranker.rank([make_video("live", duration="")], profile, discovery())
        assert [v.id for v in ranked] == ["live"]


class TestScoring:
    def test_fresher_relevant_video_ranks_first_in_discovery(self, ranker, profile):
        stale = make_video("stale", title="ramen tokyo", uploaded_at="1 month ago")
        fresh = make_video("fresh", title="ramen tokyo", uploaded_at="12 hours ago")
        ranked = ranker.rank([stale, fresh], profile, discovery())
        assert [v.id for v in ranked] == ["fresh", "stale"]

    def test_relevant_beats_unrelated_in_comfort(self, ranker, profile):
        related = make_video("rel", title="ramen tokyo")
        unrelated = make_video("other", title="guitar lesson")
        ranked = ranker.rank([unrelated, related], profile, comfort())
        assert ranked[0].id == "rel"

    def test_history_penalty_is_harsher_in_discovery(self, ranker, profile):
        video = make_video("seen", title="ramen tokyo")
        for mode, penalty in ((Pool.DISCOVERY, HISTORY_PENALTY_DISCOVERY), (Pool.COMFORT, HISTORY_PENALTY_COMFORT)):
            base = ranker.score(video, profile, ScoringContext(mode=mode))
            seen = ranker.score(video, profile, ScoringContext(mode=mode, recent_watch_ids={"seen"}))
            assert seen == pytest.approx(base * penalty)
        assert HISTORY_PENALTY_DISCOVERY < HISTORY_PENALTY_COMFORT

    def test_off_topic_viral_is_capped(self, ranker, profile):
        viral = make_video("viral", title="cat compilation", views="50M views", uploaded_at="2 hours ago")
        assert ranker.score(viral, profile, discovery()) <= DISCOVERY_OFF_TOPIC_SCORE_CAP

    def test_off_topic_cap_needs_a_profile(self, ranker):
        viral = make_video("viral", title="cat compilation", views="50M views", uploaded_at="2 hours ago")
        assert ranker.score(viral, make_profile({}), discovery()) > DISCOVERY_OFF_TOPIC_SCORE_CAP

    def test_channel_affinity_bonus_in_comfort(self, ranker, profile):
        video = make_video("v", channel_id="fav")
        base = ranker.score(video, profile, comfort())
        boosted = ranker.score(video, profile, comfort(recent_channel_ids={"fav"}))
        assert boosted - base == pytest.approx(CHANNEL_AFFINITY_BONUS)

    def test_channel_affinity_ignored_in_discovery(self, ranker, profile):
        video = make_video("v", channel_id="fav")
        base = ranker.score(video, profile, discovery())
        assert ranker.score(video, profile, discovery(recent_channel_ids={"fav"})) == pytest.approx(base)

    def test_negative_keywords_suppress(self, ranker, profile):
        video = make_video("v", title="ramen recipe")
        base = ranker.score(video, profile, comfort())
        suppressed = ranker.score(video, profile, comfort(negative_keywords={"ramen": 2}))
        assert suppressed == pytest.approx(base / 2.0)

    def test_unrelated_negative_keywords_do_nothing(self, ranker, profile):
        video = make_video("v", title="ramen recipe")
        base = ranker.score(video, profile, comfort())
        assert ranker.score(video, profile, comfort(negative_keywords={"guitar": 5})) == pytest.approx(base)

    def test_malformed_fields_never_raise(self, ranker, profile):
        video = CandidateVideo(id="x", views="lots", uploaded_at="whenever", duration="??")
        for context in (discovery(), comfort()):
            score = ranker.score(video, profile, context)
            assert math.isfinite(score)
            assert score >= 0

    def test_freshness_steps(self):
        assert freshness_score(0.5) == 15.0
        assert freshness_score(2) == 10.0
        assert freshness_score(7) == 5.0
        assert freshness_score(8) == pytest.approx(2.0)
        assert freshness_score(999) == 0.0


class TestDiversity:
    @pytest.mark.parametrize(
        "mode, cap", [(Pool.DISCOVERY, MAX_PER_CHANNEL_DISCOVERY), (Pool.COMFORT, MAX_PER_CHANNEL_COMFORT)]
    )
    def test_per_channel_cap(self, ranker, profile, mode, cap):
        videos = [make_video(f"v{i}", channel_id="same") for i in range(6)] + [make_video("other")]
        ranked = ranker.rank(videos, profile, ScoringContext(mode=mode))
        assert sum(1 for v in ranked if v.channel_id == "same") == cap
        assert "other" in {v.id for v in ranked}

    def test_channel_less_videos_are_not_grouped(self, ranker, profile):
        videos = [CandidateVideo(id=f"n{i}", title="ramen") for i in range(5)]
        assert len(ranker.rank(videos, profile, discovery())) == 5
        assert channel_key(videos[0]) != channel_key(videos[1])

    def test_channel_name_used_when_id_missing(self):
        video = CandidateVideo(id="a", channel_name="Noodle House")
        assert channel_key(video) == "Noodle House"


class TestJitter:
    def test_seeded_jitter_is_reproducible(self, profile):
        videos = [make_video(f"v{i}", title="ramen tokyo", views=f"{i + 1}K views") for i in range(10)]
        first = Ranker(rng=random.Random(7), jitter=0.075).rank(videos, profile, discovery())
        second = Ranker(rng=random.Random(7), jitter=0.075).rank(videos, profile, discovery())
        assert [v.id for v in first] == [v.id for v in second]

    def test_jitter_is_bounded(self, ranker, profile):
        video = make_video("v", title="ramen tokyo")
        base = ranker.score(video, profile, comfort())
        jittery = Ranker(rng=random.Random(3), jitter=0.075)
        for _ in range(50):
            score = jittery.score(video, profile, comfort())
            assert base * 0.925 <= score <= base * 1.075


def test_context_for_pool_reads_preferences():
    history = [make_video(f"w{i}", channel_id=f"c{i}") for i in range(30)]
    prefs = PreferenceSnapshot(ngKeywords=["spoiler", "  "], ngChannels={"bad"}, hiddenVideoIds={"h"})
    context = ScoringContext.for_pool(Pool.COMFORT, prefs, history, recent_watch_limit=25, recent_channel_limit=5)
    assert context.ng_keywords == ["spoiler"]
    assert context.ng_channels == {"bad"}
    assert context.hidden_video_ids == {"h"}
    assert len(context.recent_watch_ids) == 25
    assert context.recent_channel_ids == {f"c{i}" for i in range(5)}


def test_off_topic_videos_keep_their_order_under_the_cap():
    ranker = Ranker(jitter=0)
    profile = make_profile({"ramen": 8.0})
    stale = make_video("stale", title="guitar lesson", uploaded_at="1 month ago")
    fresh = make_video("fresh", title="guitar lesson", uploaded_at="12 hours ago")

    fresh_score = ranker.score(fresh, profile, discovery())
    stale_score = ranker.score(stale, profile, discovery())
    assert DISCOVERY_OFF_TOPIC_SCORE_CAP > fresh_score > stale_score > 0
    assert [v.id for v in ranker.rank([stale, fresh], profile, discovery())] == ["fresh", "stale"]
