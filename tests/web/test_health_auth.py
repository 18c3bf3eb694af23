"""Tests for health check, JWT auth and error rendering."""

import os
from unittest.mock import patch

from jose import jwt


def test_health_is_public(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_missing_token_rejected(client):
    assert client.get("/api/journal-entries").status_code in (401, 403)


def test_bad_signature_rejected(client):
    token = jwt.encode({"sub": "user-123"}, "some-other-secret", algorithm="HS256")
    resp = client.get("/api/journal-entries", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token"


def test_missing_sub_rejected(client, jwt_secret):
    token = jwt.encode({"email": "x@test.com"}, jwt_secret, algorithm="HS256")
    resp = client.get("/api/journal-entries", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_first_request_registers_user(client, auth_headers, db_path):
    from web.user_store import get_user

    assert get_user("user-123") is None
    client.get("/api/journal-entries", headers=auth_headers)
    assert get_user("user-123")["email"] == "test@example.com"


def test_audience_enforced_when_configured(client, jwt_secret):
    good = jwt.encode({"sub": "user-123", "aud": "innertruth"}, jwt_secret, algorithm="HS256")
    bad = jwt.encode({"sub": "user-123", "aud": "elsewhere"}, jwt_secret, algorithm="HS256")
    with patch.dict(os.environ, {"INNERTRUTH_JWT_AUDIENCE": "innertruth"}):
        assert client.get("/api/journal-entries", headers={"Authorization": f"Bearer {good}"}).status_code == 200
        assert client.get("/api/journal-entries", headers={"Authorization": f"Bearer {bad}"}).status_code == 401


def test_app_errors_render_detail_and_code(client, auth_headers):
    resp = client.get("/api/category-scores/nope", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Category not found: nope", "code": "NOT_FOUND"}
