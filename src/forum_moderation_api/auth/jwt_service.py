"""JWT token verification for the forum moderation API."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from typing import Any
from uuid import UUID

import jwt

from jwt import InvalidTokenError
from pydantic import ValidationError as PydanticValidationError

from forum_moderation_api.auth.models import TokenClaims
from forum_moderation_api.config.auth import get_auth_settings


class JWTService:
    """Decodes access tokens issued by the account service."""

    def __init__(self):
        self._settings = get_auth_settings()

    def create_access_token(self, user_pk: UUID, lifetime: int | None = None) -> str:
        """Issue an access token; used by tooling and tests."""
        now = datetime.now(UTC)
        expires_at = now + timedelta(
            seconds=lifetime or self._settings.access_token_lifetime
        )
        claims = TokenClaims(
            sub=user_pk,
            iss=self._settings.jwt_issuer,
            aud=self._settings.jwt_audience,
            iat=int(now.timestamp()),
            exp=int(expires_at.timestamp()),
        )
        return self._encode_token(claims.model_dump())

    def decode_token(self, token: str) -> TokenClaims | None:
        """Decode and validate a JWT, or None when it is not acceptable."""
        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm],
                audience=self._settings.jwt_audience,
                issuer=self._settings.jwt_issuer,
            )
            return TokenClaims(**claims)
        except (InvalidTokenError, PydanticValidationError):
            return None

    def _encode_token(self, claims: dict[str, Any]) -> str:
        serializable_claims = {
            key: str(value) if isinstance(value, UUID) else value
            for key, value in claims.items()
        }
        return jwt.encode(
            serializable_claims,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm,
        )
