"""Post and comment models for the forum moderation API."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import ModerationState


class Post(BaseDBModel):
    """Post database model."""

    topic_pk: UUID
    author_pk: UUID
    title: str
    content: str
    moderation_state: ModerationState = ModerationState.ACTIVE
    is_locked: bool = False


class PostCreate(BaseModel):
    """Post submission payload."""

    topic_pk: UUID
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1, max_length=40000)


class Comment(BaseDBModel):
    """Comment database model."""

    post_pk: UUID
    topic_pk: UUID
    author_pk: UUID
    parent_comment_pk: UUID | None = None
    content: str
    moderation_state: ModerationState = ModerationState.ACTIVE


class CommentCreate(BaseModel):
    """Comment submission payload."""

    post_pk: UUID
    parent_comment_pk: UUID | None = None
    content: str = Field(..., min_length=1, max_length=10000)


class ContentSnapshot(BaseModel):
    """The moderation-relevant view of a post or comment."""

    kind: ContentKind
    pk: UUID
    topic_pk: UUID
    author_pk: UUID
    body: str
    moderation_state: ModerationState
    is_locked: bool = False

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_post(cls, post: Post) -> "ContentSnapshot":
        """Snapshot a post."""
        return cls(
            kind=ContentKind.POST,
            pk=post.pk,
            topic_pk=post.topic_pk,
            author_pk=post.author_pk,
            body=f"{post.title}\n{post.content}",
            moderation_state=post.moderation_state,
            is_locked=post.is_locked,
        )

    @classmethod
    def from_comment(cls, comment: Comment) -> "ContentSnapshot":
        """Snapshot a comment."""
        return cls(
            kind=ContentKind.COMMENT,
            pk=comment.pk,
            topic_pk=comment.topic_pk,
            author_pk=comment.author_pk,
            body=comment.content,
            moderation_state=comment.moderation_state,
        )


class ModerationRequest(BaseModel):
    """Manual moderation action requested by a moderator."""

    action: AutomodAction
    reason: str | None = Field(None, max_length=1000)


class AppliedAction(BaseModel):
    """Summary of one executed moderation action."""

    action: AutomodAction
    previous_state: ModerationState
    new_state: ModerationState
    changed: bool
    rule_pk: UUID | None = None
    log_entry_pk: UUID | None = None
    report_pk: UUID | None = None

    model_config = ConfigDict(use_enum_values=True)


class PostSubmissionResult(BaseModel):
    """Outcome of running a post through the submission pipeline."""

    post: Post
    mentioned_user_pks: list[UUID] = Field(default_factory=list)
    matched_rule_pks: list[UUID] = Field(default_factory=list)
    applied_actions: list[AppliedAction] = Field(default_factory=list)


class CommentSubmissionResult(BaseModel):
    """Outcome of running a comment through the submission pipeline."""

    comment: Comment
    mentioned_user_pks: list[UUID] = Field(default_factory=list)
    matched_rule_pks: list[UUID] = Field(default_factory=list)
    applied_actions: list[AppliedAction] = Field(default_factory=list)
