"""Tests for reflection record persistence."""

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from db import get_conn
from reflection import store
from reflection.models import ReflectionProfile
from shared_types import ReflectionStatus, ReflectionTier


def test_create_starts_pending(user_id):
    reflection, created = store.create_reflection(user_id, "standard")
    assert created is True
    assert reflection.status == ReflectionStatus.PENDING
    assert reflection.tier == ReflectionTier.STANDARD
    assert reflection.progress == 0
    assert reflection.current_section == store.QUEUED_LABEL
    assert reflection.summary == ""
    assert reflection.is_active


def test_second_create_returns_active(user_id):
    first, _ = store.create_reflection(user_id, "free")
    second, created = store.create_reflection(user_id, "premium")
    assert created is False
    assert second.id == first.id


def test_partial_index_rejects_second_active_row(user_id):
    store.create_reflection(user_id, "free")
    conn = get_conn()
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                """INSERT INTO personality_reflections (id, user_id, tier, status, created_at, updated_at)
                   VALUES ('x', ?, 'free', 'processing', '2024-01-01', '2024-01-01')""",
                (user_id,),
            )
    finally:
        conn.close()


def test_new_reflection_allowed_after_terminal(user_id):
    first, _ = store.create_reflection(user_id, "free")
    store.fail_reflection(first.id, "boom")
    second, created = store.create_reflection(user_id, "free")
    assert created is True
    assert second.id != first.id


def test_progress_and_processing(user_id):
    reflection, _ = store.create_reflection(user_id, "free")
    store.mark_processing(reflection.id)
    row = store.get_reflection(reflection.id)
    assert row.status == ReflectionStatus.PROCESSING
    assert row.progress == 5

    store.update_progress(reflection.id, 30, "Analyzing patterns across your data...")
    row = store.get_reflection(reflection.id)
    assert (row.progress, row.current_section) == (30, "Analyzing patterns across your data...")


def test_complete_writes_profile(user_id, reflection_payload):
    reflection, _ = store.create_reflection(user_id, "premium")
    profile = ReflectionProfile.model_validate({**reflection_payload, "statistics": {"totalMessages": 12}})
    store.complete_reflection(reflection.id, profile)

    row = store.get_reflection(reflection.id)
    assert row.status == ReflectionStatus.COMPLETED
    assert row.progress == 100
    assert row.current_section is None
    assert row.blind_spots == ["Frames approval-seeking as being considerate"]
    assert row.core_traits["big5"]["emotionalStability"] == 35
    assert row.statistics["totalMessages"] == 12
    assert store.get_latest_completed(user_id).id == reflection.id
    assert store.get_active_reflection(user_id) is None


def test_fail_resets_progress(user_id):
    reflection, _ = store.create_reflection(user_id, "free")
    store.update_progress(reflection.id, 80, "Refining insights...")
    store.fail_reflection(reflection.id, "upstream down")
    row = store.get_reflection(reflection.id)
    assert row.status == ReflectionStatus.FAILED
    assert row.progress == 0
    assert row.error_message == "upstream down"
    assert not row.is_active


class TestReaper:
    def test_old_active_rows_failed(self, user_id):
        reflection, _ = store.create_reflection(user_id, "free")
        later = datetime.now(timezone.utc) + timedelta(minutes=31)
        assert store.reap_stale_reflections(30, now=later) == 1
        row = store.get_reflection(reflection.id)
        assert row.status == ReflectionStatus.FAILED
        assert row.error_message == store.INTERRUPTED_MESSAGE

    def test_recent_rows_untouched(self, user_id):
        store.create_reflection(user_id, "free")
        assert store.reap_stale_reflections(30) == 0
        assert store.get_active_reflection(user_id) is not None

    def test_terminal_rows_untouched(self, user_id, reflection_payload):
        reflection, _ = store.create_reflection(user_id, "free")
        store.complete_reflection(
            reflection.id, ReflectionProfile.model_validate({**reflection_payload, "statistics": {}})
        )
        later = datetime.now(timezone.utc) + timedelta(days=1)
        assert store.reap_stale_reflections(30, now=later) == 0
        assert store.get_reflection(reflection.id).status == ReflectionStatus.COMPLETED


class TestTerminalRecords:
    def test_complete_after_fail_is_skipped(self, user_id, reflection_payload):
        reflection, _ = store.create_reflection(user_id, "free")
        assert store.mark_processing(reflection.id) is True
        assert store.fail_reflection(reflection.id, "upstream down") is True

        profile = ReflectionProfile.model_validate({**reflection_payload, "statistics": {}})
        assert store.complete_reflection(reflection.id, profile) is False
        row = store.get_reflection(reflection.id)
        assert row.status == ReflectionStatus.FAILED
        assert row.error_message == "upstream down"
        assert row.summary == ""

    def test_complete_after_reap_is_skipped(self, user_id, reflection_payload):
        reflection, _ = store.create_reflection(user_id, "free")
        store.mark_processing(reflection.id)
        later = datetime.now(timezone.utc) + timedelta(minutes=31)
        assert store.reap_stale_reflections(30, now=later) == 1

        profile = ReflectionProfile.model_validate({**reflection_payload, "statistics": {}})
        assert store.complete_reflection(reflection.id, profile) is False
        assert store.get_reflection(reflection.id).status == ReflectionStatus.FAILED

    def test_fail_after_complete_is_skipped(self, user_id, reflection_payload):
        reflection, _ = store.create_reflection(user_id, "free")
        store.complete_reflection(reflection.id, ReflectionProfile.model_validate({**reflection_payload, "statistics": {}}))
        assert store.fail_reflection(reflection.id, store.INTERRUPTED_MESSAGE) is False
        row = store.get_reflection(reflection.id)
        assert row.status == ReflectionStatus.COMPLETED
        assert row.error_message is None

    def test_mark_processing_requires_pending(self, user_id):
        reflection, _ = store.create_reflection(user_id, "free")
        store.fail_reflection(reflection.id, "boom")
        assert store.mark_processing(reflection.id) is False
        assert store.get_reflection(reflection.id).status == ReflectionStatus.FAILED

    def test_progress_on_terminal_record_is_skipped(self, user_id):
        reflection, _ = store.create_reflection(user_id, "free")
        store.fail_reflection(reflection.id, "boom")
        before = store.get_reflection(reflection.id)
        assert store.update_progress(reflection.id, 60, "Refining insights...") is False
        row = store.get_reflection(reflection.id)
        assert (row.progress, row.current_section) == (0, before.current_section)
        assert row.updated_at == before.updated_at
