"""Submission pipeline for new posts and comments.

Order per submission: gate, persist, mentions, owner/author notification,
automod, trending activity. Everything after persistence is isolated: a
failing step is logged and the content stays.
"""

import logging

from datetime import UTC
from datetime import datetime
from uuid import UUID

from forum_moderation_api.database.models.base import ActivityKind
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.content import AppliedAction
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.models.content import CommentCreate
from forum_moderation_api.database.models.content import CommentSubmissionResult
from forum_moderation_api.database.models.content import ContentSnapshot
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.models.content import PostCreate
from forum_moderation_api.database.models.content import PostSubmissionResult
from forum_moderation_api.database.models.topic import TopicAccess
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.automod_rule import (
    AutomodRuleRepository,
)
from forum_moderation_api.database.repositories.comment import CommentRepository
from forum_moderation_api.database.repositories.post import PostRepository
from forum_moderation_api.errors import AuditLogError
from forum_moderation_api.errors import ConflictError
from forum_moderation_api.errors import NotFoundError
from forum_moderation_api.errors import ValidationError
from forum_moderation_api.services.authorization_gate import AuthorizationGate
from forum_moderation_api.services.mention_service import MentionService
from forum_moderation_api.services.moderation_executor import AutomatedSource
from forum_moderation_api.services.moderation_executor import ModerationExecutor
from forum_moderation_api.services.notification_service import NotificationService
from forum_moderation_api.services.rule_matcher import AuthorContext
from forum_moderation_api.services.rule_matcher import MatchContext
from forum_moderation_api.services.rule_matcher import evaluate_rules
from forum_moderation_api.services.trending_service import TrendingService

logger = logging.getLogger(__name__)


class SubmissionService:
    """Runs new content through the moderation pipeline."""

    def __init__(
        self,
        gate: AuthorizationGate | None = None,
        post_repo: PostRepository | None = None,
        comment_repo: CommentRepository | None = None,
        rule_repo: AutomodRuleRepository | None = None,
        mention_service: MentionService | None = None,
        notification_service: NotificationService | None = None,
        executor: ModerationExecutor | None = None,
        trending_service: TrendingService | None = None,
    ):
        self.gate = gate or AuthorizationGate()
        self.post_repo = post_repo or PostRepository()
        self.comment_repo = comment_repo or CommentRepository()
        self.rule_repo = rule_repo or AutomodRuleRepository()
        self.notification_service = notification_service or NotificationService()
        self.mention_service = mention_service or MentionService(
            notification_service=self.notification_service
        )
        self.executor = executor or ModerationExecutor(
            post_repo=self.post_repo,
            comment_repo=self.comment_repo,
            notification_service=self.notification_service,
        )
        self.trending_service = trending_service or TrendingService(
            post_repo=self.post_repo
        )

    async def submit_post(
        self, author: User, data: PostCreate
    ) -> PostSubmissionResult:
        """Gate, store and moderate a new post."""
        access = await self.gate.require_submission_access(author, data.topic_pk)

        post = await self.post_repo.create_post(
            data.topic_pk, author.pk, data.title, data.content
        )
        snapshot = ContentSnapshot.from_post(post)

        mentioned_pks = await self._process_mentions(snapshot, author)

        try:
            await self.notification_service.notify_post_in_topic(
                access.topic, post, author, already_notified=mentioned_pks
            )
        except Exception:
            logger.exception(f"Owner notification failed for post {post.pk}")

        matched_pks, applied = await self._run_automod(snapshot, author, access)

        await self._record_activity(post.topic_pk, ActivityKind.POST_CREATED, post.pk)

        refreshed = await self._reload(self.post_repo, post)
        return PostSubmissionResult(
            post=refreshed,
            mentioned_user_pks=mentioned_pks,
            matched_rule_pks=matched_pks,
            applied_actions=applied,
        )

    async def submit_comment(
        self, author: User, data: CommentCreate
    ) -> CommentSubmissionResult:
        """Gate, store and moderate a new comment."""
        post = await self.post_repo.get_by_pk(data.post_pk)
        if post is None:
            raise NotFoundError("Post not found")

        access = await self.gate.require_submission_access(author, post.topic_pk)

        if post.moderation_state == ModerationState.REMOVED:
            raise ConflictError("Cannot comment on a removed post")
        if post.is_locked:
            raise ConflictError("Post is locked")
        if data.parent_comment_pk is not None:
            parent = await self.comment_repo.get_by_pk(data.parent_comment_pk)
            if parent is None or parent.post_pk != post.pk:
                raise ValidationError("Parent comment does not belong to this post")

        comment = await self.comment_repo.create_comment(
            post.pk,
            post.topic_pk,
            author.pk,
            data.content,
            parent_comment_pk=data.parent_comment_pk,
        )
        snapshot = ContentSnapshot.from_comment(comment)

        mentioned_pks = await self._process_mentions(snapshot, author)

        try:
            await self.notification_service.notify_post_comment(
                post, comment, author, already_notified=mentioned_pks
            )
        except Exception:
            logger.exception(
                f"Post author notification failed for comment {comment.pk}"
            )

        matched_pks, applied = await self._run_automod(snapshot, author, access)

        await self._record_activity(
            comment.topic_pk, ActivityKind.COMMENT_CREATED, post.pk
        )

        refreshed = await self._reload(self.comment_repo, comment)
        return CommentSubmissionResult(
            comment=refreshed,
            mentioned_user_pks=mentioned_pks,
            matched_rule_pks=matched_pks,
            applied_actions=applied,
        )

    async def _process_mentions(
        self, snapshot: ContentSnapshot, author: User
    ) -> list[UUID]:
        try:
            return await self.mention_service.process_mentions(snapshot, author)
        except Exception:
            logger.exception(
                f"Mention processing failed for {snapshot.kind} {snapshot.pk}"
            )
            return []

    async def _run_automod(
        self, snapshot: ContentSnapshot, author: User, access: TopicAccess
    ) -> tuple[list[UUID], list[AppliedAction]]:
        """Evaluate the topic's enabled rules once and apply every match."""
        try:
            rules = await self.rule_repo.get_topic_rules(
                snapshot.topic_pk, enabled_only=True
            )
            context = MatchContext(
                body=snapshot.body,
                author=AuthorContext(
                    karma=author.karma,
                    created_at=author.created_at,
                    is_banned=access.is_banned,
                    role=access.role,
                ),
                now=datetime.now(UTC),
            )
            matched = evaluate_rules(rules, context)
        except Exception:
            logger.exception(
                f"Automod evaluation failed for {snapshot.kind} {snapshot.pk}"
            )
            return [], []

        applied: list[AppliedAction] = []
        for rule in matched:
            try:
                result = await self.executor.apply(
                    snapshot.kind, snapshot.pk, rule.action, AutomatedSource(rule=rule)
                )
                applied.append(result.summary(rule.pk))
            except AuditLogError as e:
                logger.critical(
                    f"Automod rule {rule.pk} on {snapshot.kind} {snapshot.pk} "
                    f"was rolled back, audit entry not written: {e}"
                )
            except (ConflictError, ValidationError) as e:
                logger.warning(
                    f"Skipping automod rule {rule.pk} on {snapshot.kind} "
                    f"{snapshot.pk}: {e}"
                )
            except Exception:
                logger.exception(
                    f"Automod rule {rule.pk} failed on {snapshot.kind} {snapshot.pk}"
                )

        return [rule.pk for rule in matched], applied

    async def _record_activity(
        self, topic_pk: UUID, kind: ActivityKind, post_pk: UUID
    ) -> None:
        try:
            await self.trending_service.record_activity(topic_pk, kind, post_pk=post_pk)
        except Exception:
            logger.exception(f"Trending activity not recorded for topic {topic_pk}")

    async def _reload(
        self, repo: PostRepository | CommentRepository, content: Post | Comment
    ) -> Post | Comment:
        try:
            return await repo.get_by_pk(content.pk) or content
        except Exception:
            logger.exception(f"Could not reload {content.pk} after moderation")
            return content


async def get_submission_service() -> SubmissionService:
    """Get a submission service instance."""
    return SubmissionService()
