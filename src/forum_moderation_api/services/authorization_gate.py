"""Role and ban checks for (user, topic) pairs."""

from uuid import UUID

from forum_moderation_api.database.models.base import MemberRole
from forum_moderation_api.database.models.base import TopicRole
from forum_moderation_api.database.models.topic import TopicAccess
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.topic import TopicMemberRepository
from forum_moderation_api.database.repositories.topic import TopicRepository
from forum_moderation_api.errors import AuthorizationError
from forum_moderation_api.errors import NotFoundError


class AuthorizationGate:
    """Resolves a user's effective role in a topic.

    The topic owner has no membership row; ownership is read from
    ``topics.owner_pk`` and outranks any membership role.
    """

    def __init__(
        self,
        topic_repo: TopicRepository | None = None,
        member_repo: TopicMemberRepository | None = None,
    ):
        self.topic_repo = topic_repo or TopicRepository()
        self.member_repo = member_repo or TopicMemberRepository()

    async def get_topic_access(self, user: User | None, topic_pk: UUID) -> TopicAccess:
        """Look up role, ban state and superuser flag for (user, topic)."""
        topic = await self.topic_repo.get_by_pk(topic_pk)
        if topic is None:
            raise NotFoundError("Topic not found")

        if user is None:
            return TopicAccess(topic=topic)

        membership = await self.member_repo.get_membership(topic_pk, user.pk)

        role = TopicRole.NONE
        if topic.owner_pk == user.pk:
            role = TopicRole.OWNER
        elif membership is not None:
            role = (
                TopicRole.MODERATOR
                if membership.role == MemberRole.MODERATOR
                else TopicRole.MEMBER
            )

        return TopicAccess(
            topic=topic,
            role=role,
            is_banned=bool(membership and membership.is_banned),
            is_superuser=user.is_superuser,
        )

    async def require_submission_access(
        self, user: User, topic_pk: UUID
    ) -> TopicAccess:
        """Allow members, owners and superusers that are not banned."""
        access = await self.get_topic_access(user, topic_pk)
        if access.is_banned:
            raise AuthorizationError("You are banned from this topic")
        if not access.can_submit:
            raise AuthorizationError("You must be a member of this topic to post")
        return access

    async def require_moderator(self, user: User, topic_pk: UUID) -> TopicAccess:
        """Allow topic moderators, the owner and superusers."""
        access = await self.get_topic_access(user, topic_pk)
        if not access.can_moderate:
            raise AuthorizationError(
                "Only topic moderators and owners can perform this action"
            )
        return access
