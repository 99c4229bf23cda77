"""Tests for the trending score engine and its cache."""

import json

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from forum_moderation_api.config.moderation import TrendingSettings
from forum_moderation_api.database.models.base import ActivityKind
from forum_moderation_api.database.models.trending import ActivityEvent
from forum_moderation_api.database.models.trending import TrendingTopic
from forum_moderation_api.database.models.trending import TrendingTopicList
from forum_moderation_api.services.trending_service import TrendingCache
from forum_moderation_api.services.trending_service import TrendingService
from forum_moderation_api.services.trending_service import decay_factor
from forum_moderation_api.services.trending_service import decayed_score
from forum_moderation_api.services.trending_service import rank_entries
from forum_moderation_api.services.trending_service import resolve_limit

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_event(topic_pk, hours_ago, weight=10.0, post_pk=None):
    return ActivityEvent(
        pk=uuid4(),
        topic_pk=topic_pk,
        post_pk=post_pk,
        kind=ActivityKind.POST_CREATED,
        weight=weight,
        occurred_at=NOW - timedelta(hours=hours_ago),
    )


def make_trending_topic(score, hours_since_activity=0, pk=None):
    return TrendingTopic(
        pk=pk or uuid4(),
        name="t",
        display_name="T",
        score=score,
        last_activity_at=NOW - timedelta(hours=hours_since_activity),
        created_at=NOW - timedelta(days=10),
    )


class TestScoring:
    """Test the pure scoring functions."""

    def test_decay_halves_every_half_life(self):
        assert decay_factor(0, 24) == 1.0
        assert decay_factor(24, 24) == pytest.approx(0.5)
        assert decay_factor(48, 24) == pytest.approx(0.25)

    def test_future_events_count_as_new(self):
        assert decay_factor(-5, 24) == 1.0

    def test_half_life_must_be_positive(self):
        with pytest.raises(ValueError):
            decay_factor(1, 0)

    def test_decayed_score_sums_inside_window(self):
        topic_pk = uuid4()
        events = [
            make_event(topic_pk, 0, weight=10),
            make_event(topic_pk, 24, weight=10),
            make_event(topic_pk, 200, weight=10),
        ]

        score = decayed_score(events, NOW, half_life_hours=24, window_hours=168)

        assert score == pytest.approx(15.0)

    def test_score_is_deterministic(self):
        topic_pk = uuid4()
        events = [make_event(topic_pk, hours) for hours in (1, 5, 30)]

        first = decayed_score(events, NOW, 24, 168)
        second = decayed_score(list(reversed(events)), NOW, 24, 168)

        assert first == second

    def test_ranking_is_stable_as_time_passes(self):
        topic_a, topic_b = uuid4(), uuid4()
        events_a = [make_event(topic_a, 2, weight=10), make_event(topic_a, 3)]
        events_b = [make_event(topic_b, 1, weight=5)]

        for later in (NOW, NOW + timedelta(hours=12), NOW + timedelta(hours=36)):
            score_a = decayed_score(events_a, later, 24, 168)
            score_b = decayed_score(events_b, later, 24, 168)
            assert score_a > score_b

    def test_rank_entries_breaks_ties_on_recency(self):
        older = make_trending_topic(5.0, hours_since_activity=3)
        newer = make_trending_topic(5.0, hours_since_activity=1)
        top = make_trending_topic(9.0, hours_since_activity=10)

        assert rank_entries([older, newer, top]) == [top, newer, older]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 10),
            ("", 10),
            ("abc", 10),
            ("0", 10),
            ("-3", 10),
            ("7", 7),
            (" 25 ", 25),
            ("5000", 100),
            (50, 50),
        ],
    )
    def test_resolve_limit(self, raw, expected):
        assert resolve_limit(raw, default=10, maximum=100) == expected


@pytest.fixture
def mock_redis():
    client = AsyncMock()
    client.get.return_value = None
    return client


@pytest.fixture
def cache(mock_redis):
    async def client_factory():
        return mock_redis

    return TrendingCache(ttl_seconds=300, client_factory=client_factory)


class TestTrendingCache:
    """Test the Redis-backed ranking cache."""

    @pytest.mark.asyncio
    async def test_set_uses_ttl(self, cache, mock_redis):
        value = TrendingTopicList(topics=[], computed_at=NOW)

        await cache.set("topics", value)

        key, ttl, payload = mock_redis.setex.call_args.args
        assert key == "trending:topics"
        assert ttl == 300
        assert json.loads(payload)["topics"] == []

    @pytest.mark.asyncio
    async def test_unreadable_entry_is_a_miss(self, cache, mock_redis):
        mock_redis.get.return_value = "{not json"

        assert await cache.get("topics", TrendingTopicList) is None

    @pytest.mark.asyncio
    async def test_status(self, cache, mock_redis):
        mock_redis.ttl.side_effect = [120, -2]

        status = await cache.status()

        assert status.topics_cached is True
        assert status.topics_expires_in == 120
        assert status.posts_cached is False
        assert status.posts_expires_in is None

    @pytest.mark.asyncio
    async def test_clear(self, cache, mock_redis):
        await cache.clear()

        mock_redis.delete.assert_awaited_once_with("trending:topics", "trending:posts")


@pytest.fixture
def settings():
    return TrendingSettings()


@pytest.fixture
def mock_topic_repo():
    return AsyncMock()


@pytest.fixture
def mock_post_repo():
    repo = AsyncMock()
    repo.get_visible_by_pks.return_value = {}
    return repo


@pytest.fixture
def mock_activity_repo():
    repo = AsyncMock()
    repo.get_events_since.return_value = []
    return repo


@pytest.fixture
def trending_service(
    mock_topic_repo, mock_post_repo, mock_activity_repo, cache, settings
):
    return TrendingService(
        topic_repo=mock_topic_repo,
        post_repo=mock_post_repo,
        activity_repo=mock_activity_repo,
        cache=cache,
        settings=settings,
    )


class TestTrendingService:
    """Test activity recording and ranked listings."""

    @pytest.mark.asyncio
    async def test_record_activity_uses_kind_weight(
        self, trending_service, mock_activity_repo, mock_topic_repo
    ):
        topic_pk, post_pk = uuid4(), uuid4()

        await trending_service.record_activity(
            topic_pk, ActivityKind.COMMENT_CREATED, post_pk=post_pk, occurred_at=NOW
        )

        mock_activity_repo.record_event.assert_awaited_once_with(
            topic_pk, ActivityKind.COMMENT_CREATED, 5.0, NOW, post_pk=post_pk
        )
        mock_topic_repo.touch_last_activity.assert_awaited_once_with(topic_pk, NOW)

    @pytest.mark.asyncio
    async def test_negative_votes_never_lower_the_score(
        self, trending_service, mock_activity_repo
    ):
        await trending_service.record_activity(
            uuid4(), ActivityKind.VOTE_SETTLED, weight_multiplier=-3, occurred_at=NOW
        )

        weight = mock_activity_repo.record_event.call_args.args[2]
        assert weight == 6.0

    @pytest.mark.asyncio
    async def test_member_join_uses_member_weight(
        self, trending_service, mock_activity_repo, mock_topic_repo
    ):
        topic_pk = uuid4()

        await trending_service.record_activity(
            topic_pk, ActivityKind.MEMBER_JOINED, occurred_at=NOW
        )

        args = mock_activity_repo.record_event.call_args.args
        assert args[0] == topic_pk
        assert args[1] == ActivityKind.MEMBER_JOINED
        assert args[2] == 2.0
        mock_topic_repo.touch_last_activity.assert_awaited_once_with(topic_pk, NOW)

    @pytest.mark.asyncio
    async def test_refresh_topic_scores_persists_and_ranks(
        self, trending_service, mock_topic_repo, mock_activity_repo, make_topic
    ):
        busy = make_topic(name="busy", last_activity_at=NOW)
        quiet = make_topic(name="quiet", last_activity_at=NOW - timedelta(days=3))
        mock_topic_repo.get_all_topics.return_value = [quiet, busy]
        mock_activity_repo.get_events_since.return_value = [
            make_event(busy.pk, 1),
            make_event(busy.pk, 2),
            make_event(quiet.pk, 72),
        ]

        ranking = await trending_service.refresh_topic_scores(NOW)

        assert [entry.pk for entry in ranking] == [busy.pk, quiet.pk]
        scores = mock_topic_repo.update_trending_scores.call_args.args[0]
        assert scores[quiet.pk] == pytest.approx(10 * 0.5**3)
        since = mock_activity_repo.get_events_since.call_args.args[0]
        assert since == NOW - timedelta(hours=168)

    @pytest.mark.asyncio
    async def test_topics_served_from_cache(
        self, trending_service, mock_redis, mock_topic_repo
    ):
        cached = TrendingTopicList(
            topics=[make_trending_topic(float(score)) for score in (9, 8, 7)],
            computed_at=NOW,
        )
        mock_redis.get.return_value = cached.model_dump_json()

        result = await trending_service.get_trending_topics("2")

        assert result.cached is True
        assert [topic.score for topic in result.topics] == [9.0, 8.0]
        mock_topic_repo.get_all_topics.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_miss_computes_and_stores(
        self, trending_service, mock_redis, mock_topic_repo, make_topic
    ):
        mock_topic_repo.get_all_topics.return_value = [make_topic()]

        result = await trending_service.get_trending_topics(None)

        assert result.cached is False
        assert len(result.topics) == 1
        mock_redis.setex.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_force_refresh_bypasses_cache(
        self, trending_service, mock_redis, mock_topic_repo
    ):
        mock_topic_repo.get_all_topics.return_value = []

        await trending_service.get_trending_topics(force_refresh=True)

        mock_redis.get.assert_not_awaited()
        mock_topic_repo.get_all_topics.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_trending_posts_skip_hidden_posts(
        self, trending_service, mock_activity_repo, mock_post_repo, make_post
    ):
        visible = make_post()
        hidden_pk = uuid4()
        mock_activity_repo.get_events_since.return_value = [
            make_event(visible.topic_pk, 1, post_pk=visible.pk),
            make_event(visible.topic_pk, 1, weight=50, post_pk=hidden_pk),
        ]
        mock_post_repo.get_visible_by_pks.return_value = {visible.pk: visible}

        ranking = await trending_service.compute_trending_posts(NOW)

        assert [entry.pk for entry in ranking] == [visible.pk]
        assert set(mock_post_repo.get_visible_by_pks.call_args.args[0]) == {
            visible.pk,
            hidden_pk,
        }
