"""Shared fixtures for web API tests."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt


@pytest.fixture
def jwt_secret():
    return "test-jwt-secret"


@pytest.fixture
def auth_token(jwt_secret):
    return jwt.encode(
        {"sub": "user-123", "email": "test@example.com", "name": "Test"},
        jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


def _make_auth_token(jwt_secret, user_id, email="u@test.com", name="U"):
    return jwt.encode(
        {"sub": user_id, "email": email, "name": name},
        jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_token_b(jwt_secret):
    """Second user token for isolation tests."""
    return _make_auth_token(jwt_secret, "user-456", "b@test.com", "UserB")


@pytest.fixture
def auth_headers_b(auth_token_b):
    return {"Authorization": f"Bearer {auth_token_b}"}


@pytest.fixture
def app_llm(mock_llm):
    """The LLM every route sees; tests set its ``generate.return_value``."""
    return mock_llm


@pytest.fixture
def client(jwt_secret, db_path, app_llm):
    """Test client with its own database and a mocked LLM provider.

    Entered as a context manager so the lifespan (init, reaper, job shutdown) runs.
    """
    from cli.config_models import AppConfig
    from web.app import app
    from web.deps import get_config, get_llm_provider

    config = AppConfig()
    env = {"INNERTRUTH_JWT_SECRET": jwt_secret}
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_llm_provider] = lambda: app_llm
    with patch.dict(os.environ, env), patch("web.app.get_config", return_value=config):
        os.environ.pop("INNERTRUTH_JWT_AUDIENCE", None)
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()
