"""Authentication dependencies for FastAPI endpoints."""

import logging

from fastapi import Depends
from fastapi import Request

from forum_moderation_api.auth.jwt_service import JWTService
from forum_moderation_api.config.auth import get_auth_settings
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.user import UserRepository
from forum_moderation_api.errors import AuthenticationError
from forum_moderation_api.errors import AuthorizationError

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> str | None:
    """Bearer header first, then the access cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return request.cookies.get(get_auth_settings().effective_cookie_name)


async def _resolve_user(token: str) -> User | None:
    claims = JWTService().decode_token(token)
    if claims is None:
        logger.debug("Rejected access token")
        return None
    return await UserRepository().get_by_pk(claims.sub)


async def get_current_user(request: Request) -> User:
    """Get the authenticated user or raise AuthenticationError."""
    token = _extract_token(request)
    if not token:
        raise AuthenticationError("Access token required")

    user = await _resolve_user(token)
    if user is None:
        logger.warning("Access token did not resolve to a user")
        raise AuthenticationError("Invalid token")
    return user


# Create dependency instance to avoid function calls in defaults
get_current_user_dependency = Depends(get_current_user)


async def require_superuser(current_user: User = get_current_user_dependency) -> User:
    """Require a global superuser."""
    if not current_user.is_superuser:
        raise AuthorizationError("Superuser access required")
    return current_user
