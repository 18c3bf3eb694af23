"""Tests for personality reflection routes."""

import json
import time

import pytest
from helpers import seed_journals

from reflection import store
from reflection.jobs import INSUFFICIENT_DATA_MESSAGE

BASE = "/api/personality-reflection"


def _wait_until_done(client, headers, reflection_id, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        data = client.get(f"{BASE}/{reflection_id}", headers=headers).json()
        if data["status"] in ("completed", "failed"):
            return data
        time.sleep(0.05)
    pytest.fail(f"reflection {reflection_id} still {data['status']}")


@pytest.fixture
def ready(user_id, now, app_llm, reflection_payload):
    seed_journals(user_id, 3, now)
    app_llm.generate.return_value = json.dumps(reflection_payload)
    return user_id


def test_post_then_poll_until_completed(client, auth_headers, ready):
    resp = client.post(BASE, json={"tier": "standard"}, headers=auth_headers)
    assert resp.status_code == 200
    created = resp.json()
    assert created["status"] in ("pending", "processing", "completed")
    assert created["tier"] == "standard"

    done = _wait_until_done(client, auth_headers, created["id"])
    assert done["status"] == "completed"
    assert done["progress"] == 100
    assert done["currentSection"] is None
    assert done["coreTraits"]["archetype"] == "The Guarded Achiever"
    assert done["statistics"]["totalJournalEntries"] == 3
    assert done["visibleSections"] == [
        "behavioralPatterns",
        "emotionalPatterns",
        "relationshipDynamics",
        "growthAreas",
        "strengths",
        "blindSpots",
    ]

    latest = client.get(BASE, headers=auth_headers).json()
    assert latest["id"] == created["id"]


def test_default_tier_is_free(client, auth_headers, ready):
    data = client.post(BASE, headers=auth_headers).json()
    assert data["tier"] == "free"
    assert data["visibleSections"] == ["behavioralPatterns", "growthAreas"]
    _wait_until_done(client, auth_headers, data["id"])


def test_null_tier_is_free(client, auth_headers, ready):
    resp = client.post(BASE, json={"tier": None}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["tier"] == "free"
    _wait_until_done(client, auth_headers, resp.json()["id"])


def test_insufficient_data_ends_failed(client, auth_headers, user_id):
    created = client.post(BASE, json={"tier": "free"}, headers=auth_headers).json()
    done = _wait_until_done(client, auth_headers, created["id"])
    assert done["status"] == "failed"
    assert done["errorMessage"] == INSUFFICIENT_DATA_MESSAGE
    assert client.get(BASE, headers=auth_headers).status_code == 404


def test_active_reflection_returned_instead_of_new(client, auth_headers, user_id, app_llm):
    existing, _ = store.create_reflection(user_id, "premium")
    data = client.post(BASE, json={"tier": "free"}, headers=auth_headers).json()
    assert data["id"] == existing.id
    assert data["tier"] == "premium"
    app_llm.generate.assert_not_called()


def test_invalid_tier(client, auth_headers):
    resp = client.post(BASE, json={"tier": "platinum"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid tier. Must be 'free', 'standard', or 'premium'"


def test_nothing_yet(client, auth_headers):
    resp = client.get(BASE, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No personality reflection found. Generate one first."
    assert client.get(f"{BASE}/latest", headers=auth_headers).status_code == 404


def test_latest_prefers_active(client, auth_headers, user_id):
    active, _ = store.create_reflection(user_id, "free")
    data = client.get(f"{BASE}/latest", headers=auth_headers).json()
    assert data["id"] == active.id
    assert data["status"] == "pending"
    assert data["currentSection"] == store.QUEUED_LABEL
    # nothing completed yet
    assert client.get(BASE, headers=auth_headers).status_code == 404


def test_unknown_id(client, auth_headers):
    resp = client.get(f"{BASE}/does-not-exist", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Personality reflection not found."


def test_other_users_reflection_forbidden(client, auth_headers_b, user_id):
    reflection, _ = store.create_reflection(user_id, "free")
    resp = client.get(f"{BASE}/{reflection.id}", headers=auth_headers_b)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied."
