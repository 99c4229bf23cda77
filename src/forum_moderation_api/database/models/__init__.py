"""Database models for the forum moderation API."""

from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import RuleCondition
from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.base import ModLogAction
from forum_moderation_api.database.models.base import ModTargetType
from forum_moderation_api.database.models.base import NotificationType
from forum_moderation_api.database.models.base import PaginatedResponse
from forum_moderation_api.database.models.base import PaginationInfo
from forum_moderation_api.database.models.base import TopicRole
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.models.mention import Mention
from forum_moderation_api.database.models.mod_log import ModLogEntry
from forum_moderation_api.database.models.notification import Notification
from forum_moderation_api.database.models.topic import Topic
from forum_moderation_api.database.models.user import User

__all__ = [
    "AutomodAction",
    "AutomodRule",
    "BaseDBModel",
    "Comment",
    "ContentKind",
    "Mention",
    "ModLogAction",
    "ModLogEntry",
    "ModTargetType",
    "ModerationState",
    "Notification",
    "NotificationType",
    "PaginatedResponse",
    "PaginationInfo",
    "Post",
    "RuleCondition",
    "Topic",
    "TopicRole",
    "User",
]
