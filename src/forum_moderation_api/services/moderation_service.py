"""Manual moderation of posts and comments by topic moderators."""

from uuid import UUID

from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.content import ModerationRequest
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.comment import CommentRepository
from forum_moderation_api.database.repositories.post import PostRepository
from forum_moderation_api.errors import NotFoundError
from forum_moderation_api.services.authorization_gate import AuthorizationGate
from forum_moderation_api.services.moderation_executor import ActionResult
from forum_moderation_api.services.moderation_executor import ManualSource
from forum_moderation_api.services.moderation_executor import ModerationExecutor


class ModerationService:
    """Checks moderator authority, then hands the action to the executor."""

    def __init__(
        self,
        gate: AuthorizationGate | None = None,
        post_repo: PostRepository | None = None,
        comment_repo: CommentRepository | None = None,
        executor: ModerationExecutor | None = None,
    ):
        self.gate = gate or AuthorizationGate()
        self.post_repo = post_repo or PostRepository()
        self.comment_repo = comment_repo or CommentRepository()
        self.executor = executor or ModerationExecutor(
            post_repo=self.post_repo, comment_repo=self.comment_repo
        )

    async def moderate(
        self,
        actor: User,
        content_kind: ContentKind,
        content_pk: UUID,
        request: ModerationRequest,
    ) -> ActionResult:
        """Apply a moderator's action; every call is written to the mod log."""
        repo = (
            self.post_repo if content_kind == ContentKind.POST else self.comment_repo
        )
        content = await repo.get_by_pk(content_pk)
        if content is None:
            kind = ContentKind(content_kind).value.capitalize()
            raise NotFoundError(f"{kind} not found")

        access = await self.gate.require_moderator(actor, content.topic_pk)
        source = ManualSource(
            actor_pk=actor.pk, actor_role=access.role, reason=request.reason
        )
        return await self.executor.apply(
            content_kind, content_pk, request.action, source
        )


async def get_moderation_service() -> ModerationService:
    """Get a moderation service instance."""
    return ModerationService()
