"""User model for the forum moderation API."""

from forum_moderation_api.database.models.base import BaseDBModel


class User(BaseDBModel):
    """User database model."""

    email: str
    username: str
    post_cred: int = 0
    comment_cred: int = 0
    is_superuser: bool = False

    @property
    def karma(self) -> int:
        """Accumulated post and comment cred."""
        return self.post_cred + self.comment_cred

