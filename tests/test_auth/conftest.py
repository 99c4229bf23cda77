"""Test fixtures for authentication tests."""

from unittest.mock import patch

import pytest

from forum_moderation_api.auth.jwt_service import JWTService
from forum_moderation_api.config.auth import AuthSettings


@pytest.fixture
def auth_settings():
    """Create test authentication settings."""
    return AuthSettings(
        jwt_secret_key="test_secret_key_32_bytes_long_12345",
        jwt_algorithm="HS256",
        jwt_issuer="test-issuer",
        jwt_audience="test-audience",
        access_token_lifetime=3600,
        access_cookie_name="test_at",
        cookie_secure=False,
    )


@pytest.fixture
def patched_auth_settings(auth_settings):
    """Serve ``auth_settings`` to every module that reads auth config."""
    with (
        patch(
            "forum_moderation_api.auth.jwt_service.get_auth_settings",
            return_value=auth_settings,
        ),
        patch(
            "forum_moderation_api.auth.dependencies.get_auth_settings",
            return_value=auth_settings,
        ),
    ):
        yield auth_settings


@pytest.fixture
def jwt_service(patched_auth_settings):
    return JWTService()
