"""Service layer for the forum moderation API."""

from forum_moderation_api.services.automod_service import AutomodService
from forum_moderation_api.services.mod_log_service import ModLogService
from forum_moderation_api.services.moderation_executor import ModerationExecutor
from forum_moderation_api.services.submission_service import SubmissionService
from forum_moderation_api.services.trending_service import TrendingService

__all__ = [
    "AutomodService",
    "ModLogService",
    "ModerationExecutor",
    "SubmissionService",
    "TrendingService",
]
