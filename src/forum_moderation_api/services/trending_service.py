"""Trending score engine.

Each activity event contributes ``weight * 0.5 ** (age / half_life)``. Scores
are the sum over a rolling window, so they are deterministic for a fixed
history and a fixed "now", and every score decays by the same factor as time
passes, which keeps the ranking stable between events.
"""

import json
import logging

from collections import defaultdict
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from datetime import UTC
from datetime import datetime
from datetime import timedelta
from typing import Any
from typing import Protocol
from uuid import UUID

import redis.asyncio as redis

from pydantic import BaseModel

from forum_moderation_api.config.moderation import TrendingSettings
from forum_moderation_api.config.redis import get_redis_settings
from forum_moderation_api.config.settings import get_trending_settings
from forum_moderation_api.database.models.base import ActivityKind
from forum_moderation_api.database.models.trending import ActivityEvent
from forum_moderation_api.database.models.trending import TrendingCacheStatus
from forum_moderation_api.database.models.trending import TrendingPost
from forum_moderation_api.database.models.trending import TrendingPostList
from forum_moderation_api.database.models.trending import TrendingTopic
from forum_moderation_api.database.models.trending import TrendingTopicList
from forum_moderation_api.database.repositories.activity import (
    ActivityEventRepository,
)
from forum_moderation_api.database.repositories.post import PostRepository
from forum_moderation_api.database.repositories.topic import TopicRepository
from forum_moderation_api.workers.redis_connection import get_redis_client

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
SCORE_PRECISION = 6

TOPICS_CACHE_KEY = "topics"
POSTS_CACHE_KEY = "posts"


class RankedEntry(Protocol):
    pk: UUID
    score: float
    last_activity_at: datetime


def decay_factor(age_hours: float, half_life_hours: float) -> float:
    """Fraction of an event's weight left after ``age_hours``.

    Future-dated events count as brand new.
    """
    if half_life_hours <= 0:
        raise ValueError("half_life_hours must be positive")
    return 0.5 ** (max(age_hours, 0.0) / half_life_hours)


def decayed_score(
    events: Iterable[ActivityEvent],
    now: datetime,
    half_life_hours: float,
    window_hours: float,
) -> float:
    """Sum of decayed weights of the events inside the window."""
    total = 0.0
    for event in events:
        age_hours = (now - event.occurred_at).total_seconds() / SECONDS_PER_HOUR
        if age_hours > window_hours:
            continue
        total += max(event.weight, 0.0) * decay_factor(age_hours, half_life_hours)
    return round(total, SCORE_PRECISION)


def rank_entries[T: RankedEntry](entries: Iterable[T]) -> list[T]:
    """Score descending, then most recent activity, then pk."""
    return sorted(
        entries,
        key=lambda entry: (
            -entry.score,
            -entry.last_activity_at.timestamp(),
            str(entry.pk),
        ),
    )


def resolve_limit(raw: Any, default: int, maximum: int) -> int:
    """Parse a client-supplied limit.

    Missing, non-numeric or non-positive values fall back to ``default``;
    anything above ``maximum`` is clamped.
    """
    try:
        limit = int(str(raw).strip())
    except (TypeError, ValueError):
        return min(default, maximum)
    if limit <= 0:
        return min(default, maximum)
    return min(limit, maximum)


class TrendingCache:
    """Redis-backed cache of computed rankings with a fixed TTL."""

    def __init__(
        self,
        ttl_seconds: int,
        client_factory: Callable[[], Awaitable[redis.Redis]] = get_redis_client,
        prefix: str = "trending",
    ):
        self.ttl_seconds = ttl_seconds
        self.client_factory = client_factory
        self.prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}:{name}"

    async def get[M: BaseModel](self, name: str, model: type[M]) -> M | None:
        """Cached value, or None when missing or unreadable."""
        client = await self.client_factory()
        cached = await client.get(self._key(name))
        if not cached:
            return None
        try:
            return model.model_validate(json.loads(cached))
        except ValueError as e:
            logger.warning(f"Discarding unreadable trending cache entry {name}: {e}")
            return None

    async def set(self, name: str, value: BaseModel) -> None:
        client = await self.client_factory()
        await client.setex(self._key(name), self.ttl_seconds, value.model_dump_json())

    async def clear(self) -> None:
        client = await self.client_factory()
        await client.delete(self._key(TOPICS_CACHE_KEY), self._key(POSTS_CACHE_KEY))

    async def status(self) -> TrendingCacheStatus:
        client = await self.client_factory()
        topics_ttl = await client.ttl(self._key(TOPICS_CACHE_KEY))
        posts_ttl = await client.ttl(self._key(POSTS_CACHE_KEY))
        return TrendingCacheStatus(
            ttl_seconds=self.ttl_seconds,
            topics_cached=topics_ttl > 0,
            topics_expires_in=topics_ttl if topics_ttl > 0 else None,
            posts_cached=posts_ttl > 0,
            posts_expires_in=posts_ttl if posts_ttl > 0 else None,
        )


class TrendingService:
    """Records activity and computes trending rankings for topics and posts."""

    def __init__(
        self,
        topic_repo: TopicRepository | None = None,
        post_repo: PostRepository | None = None,
        activity_repo: ActivityEventRepository | None = None,
        cache: TrendingCache | None = None,
        settings: TrendingSettings | None = None,
    ):
        self.settings = settings or get_trending_settings()
        self.topic_repo = topic_repo or TopicRepository()
        self.post_repo = post_repo or PostRepository()
        self.activity_repo = activity_repo or ActivityEventRepository()
        self.cache = cache or TrendingCache(
            self.settings.cache_ttl_seconds,
            prefix=get_redis_settings().cache_key_prefix,
        )

    def weight_for(self, kind: ActivityKind) -> float:
        """Base weight of one event of ``kind``."""
        weights = {
            ActivityKind.POST_CREATED: self.settings.post_weight,
            ActivityKind.COMMENT_CREATED: self.settings.comment_weight,
            ActivityKind.MEMBER_JOINED: self.settings.member_join_weight,
            ActivityKind.VOTE_SETTLED: self.settings.vote_weight,
        }
        return weights[ActivityKind(kind)]

    async def record_activity(
        self,
        topic_pk: UUID,
        kind: ActivityKind,
        post_pk: UUID | None = None,
        weight_multiplier: float = 1.0,
        occurred_at: datetime | None = None,
    ) -> ActivityEvent:
        """Store an activity event and bump the topic's last activity time.

        Vote settlements pass the vote value as ``weight_multiplier``; only
        its magnitude counts so that scores never go negative.
        """
        occurred_at = occurred_at or datetime.now(UTC)
        weight = self.weight_for(kind) * abs(weight_multiplier)
        event = await self.activity_repo.record_event(
            topic_pk, kind, weight, occurred_at, post_pk=post_pk
        )
        await self.topic_repo.touch_last_activity(topic_pk, occurred_at)
        return event

    async def refresh_topic_scores(
        self, now: datetime | None = None
    ) -> list[TrendingTopic]:
        """Recompute and persist every topic's score; returns the ranking."""
        now = now or datetime.now(UTC)
        since = now - timedelta(hours=self.settings.topic_window_hours)
        events = await self.activity_repo.get_events_since(since)
        topics = await self.topic_repo.get_all_topics()

        by_topic: dict[UUID, list[ActivityEvent]] = defaultdict(list)
        for event in events:
            by_topic[event.topic_pk].append(event)

        entries = [
            TrendingTopic(
                pk=topic.pk,
                name=topic.name,
                display_name=topic.display_name,
                score=decayed_score(
                    by_topic.get(topic.pk, []),
                    now,
                    self.settings.topic_half_life_hours,
                    self.settings.topic_window_hours,
                ),
                last_activity_at=topic.last_activity_at,
                created_at=topic.created_at,
            )
            for topic in topics
        ]
        await self.topic_repo.update_trending_scores(
            {entry.pk: entry.score for entry in entries}
        )
        ranking = rank_entries(entries)
        logger.info(f"Refreshed trending scores for {len(ranking)} topics")
        return ranking

    async def compute_trending_posts(
        self, now: datetime | None = None, topic_pk: UUID | None = None
    ) -> list[TrendingPost]:
        """Rank active posts by the decayed activity they attracted."""
        now = now or datetime.now(UTC)
        since = now - timedelta(hours=self.settings.post_window_hours)
        events = await self.activity_repo.get_events_since(
            since, topic_pk=topic_pk, posts_only=True
        )

        by_post: dict[UUID, list[ActivityEvent]] = defaultdict(list)
        for event in events:
            if event.post_pk is not None:
                by_post[event.post_pk].append(event)

        posts = await self.post_repo.get_visible_by_pks(list(by_post))
        entries = [
            TrendingPost(
                pk=post.pk,
                topic_pk=post.topic_pk,
                title=post.title,
                author_pk=post.author_pk,
                score=decayed_score(
                    by_post[post.pk],
                    now,
                    self.settings.post_half_life_hours,
                    self.settings.post_window_hours,
                ),
                last_activity_at=max(event.occurred_at for event in by_post[post.pk]),
                created_at=post.created_at,
            )
            for post in posts.values()
        ]
        return rank_entries(entries)

    async def get_trending_topics(
        self, limit: int | str | None = None, force_refresh: bool = False
    ) -> TrendingTopicList:
        """Top topics, served from cache unless stale or forced."""
        limit = resolve_limit(
            limit, self.settings.default_topic_limit, self.settings.max_limit
        )
        cached = None
        if not force_refresh:
            cached = await self.cache.get(TOPICS_CACHE_KEY, TrendingTopicList)

        if cached is None:
            now = datetime.now(UTC)
            ranking = await self.refresh_topic_scores(now)
            cached = TrendingTopicList(
                topics=ranking[: self.settings.max_limit], computed_at=now
            )
            await self.cache.set(TOPICS_CACHE_KEY, cached)
            return TrendingTopicList(topics=cached.topics[:limit], computed_at=now)

        return TrendingTopicList(
            topics=cached.topics[:limit], computed_at=cached.computed_at, cached=True
        )

    async def get_trending_posts(
        self, limit: int | str | None = None, force_refresh: bool = False
    ) -> TrendingPostList:
        """Top posts across topics, served from cache unless stale or forced."""
        limit = resolve_limit(
            limit, self.settings.default_post_limit, self.settings.max_limit
        )
        cached = None
        if not force_refresh:
            cached = await self.cache.get(POSTS_CACHE_KEY, TrendingPostList)

        if cached is None:
            now = datetime.now(UTC)
            ranking = await self.compute_trending_posts(now)
            cached = TrendingPostList(
                posts=ranking[: self.settings.max_limit], computed_at=now
            )
            await self.cache.set(POSTS_CACHE_KEY, cached)
            return TrendingPostList(posts=cached.posts[:limit], computed_at=now)

        return TrendingPostList(
            posts=cached.posts[:limit], computed_at=cached.computed_at, cached=True
        )

    async def get_trending_posts_for_topic(
        self, topic_pk: UUID, limit: int | str | None = None
    ) -> TrendingPostList:
        """Top posts of one topic, computed on every call."""
        limit = resolve_limit(
            limit, self.settings.default_post_limit, self.settings.max_limit
        )
        now = datetime.now(UTC)
        ranking = await self.compute_trending_posts(now, topic_pk=topic_pk)
        return TrendingPostList(posts=ranking[:limit], computed_at=now)

    async def get_cache_status(self) -> TrendingCacheStatus:
        return await self.cache.status()

    async def clear_cache(self) -> None:
        await self.cache.clear()
        logger.info("Trending cache cleared")


async def get_trending_service() -> TrendingService:
    """Get a trending service instance."""
    return TrendingService()
