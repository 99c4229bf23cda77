"""Test configuration for API tests."""

import pytest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.errors import register_exception_handlers


def _provide(value):
    return lambda: value


@pytest.fixture
def current_user(make_user):
    return make_user(username="requester")


@pytest.fixture
def build_client(current_user):
    """Build a TestClient around the given routers without a database."""

    def _build_client(*routers, overrides=None, authenticated=True) -> TestClient:
        app = FastAPI(title="Test API")
        register_exception_handlers(app)
        for router in routers:
            app.include_router(router, prefix="/api/v1")
        if authenticated:
            app.dependency_overrides[get_current_user] = lambda: current_user
        for dependency, value in (overrides or {}).items():
            app.dependency_overrides[dependency] = _provide(value)
        return TestClient(app)

    return _build_client
