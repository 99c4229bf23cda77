"""Authentication models for the forum moderation API."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import Field


class TokenClaims(BaseModel):
    """JWT access token claims."""

    sub: UUID = Field(description="User UUID")
    iss: str = Field(description="Token issuer")
    aud: str = Field(description="Token audience")
    iat: int = Field(description="Issued at timestamp")
    exp: int = Field(description="Expiration timestamp")
