"""Database repositories for the forum moderation API."""

from forum_moderation_api.database.repositories.activity import (
    ActivityEventRepository,
)
from forum_moderation_api.database.repositories.automod_rule import (
    AutomodRuleRepository,
)
from forum_moderation_api.database.repositories.base import BaseRepository
from forum_moderation_api.database.repositories.comment import CommentRepository
from forum_moderation_api.database.repositories.mention import MentionRepository
from forum_moderation_api.database.repositories.mod_log import ModLogRepository
from forum_moderation_api.database.repositories.notification import (
    NotificationRepository,
)
from forum_moderation_api.database.repositories.post import PostRepository
from forum_moderation_api.database.repositories.report import ReportRepository
from forum_moderation_api.database.repositories.topic import TopicMemberRepository
from forum_moderation_api.database.repositories.topic import TopicRepository
from forum_moderation_api.database.repositories.user import UserRepository

__all__ = [
    "ActivityEventRepository",
    "AutomodRuleRepository",
    "BaseRepository",
    "CommentRepository",
    "MentionRepository",
    "ModLogRepository",
    "NotificationRepository",
    "PostRepository",
    "ReportRepository",
    "TopicMemberRepository",
    "TopicRepository",
    "UserRepository",
]
