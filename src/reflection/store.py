"""Persistence for personality reflection records and their job status."""

import sqlite3
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import structlog

from db import dumps, get_conn, loads, to_iso, utcnow_iso
from shared_types import ReflectionStatus, ReflectionTier

from .models import SECTION_FIELDS, PersonalityReflection, ReflectionProfile

logger = structlog.get_logger()

QUEUED_LABEL = "Queued for processing..."
INTERRUPTED_MESSAGE = "Reflection was interrupted before it finished. Please try again."


def _row_to_reflection(row) -> PersonalityReflection:
    data = {
        "id": row["id"],
        "user_id": row["user_id"],
        "tier": row["tier"],
        "status": row["status"],
        "progress": row["progress"],
        "current_section": row["current_section"],
        "error_message": row["error_message"],
        "summary": row["summary"] or "",
        "core_traits": loads(row["core_traits"], {}),
        "holy_shit_moment": row["holy_shit_moment"],
        "growth_leverage_point": row["growth_leverage_point"],
        "statistics": loads(row["statistics"], None),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }
    for name in SECTION_FIELDS:
        data[name] = loads(row[name], [])
    return PersonalityReflection(**data)


def _fetch_one(query: str, params: tuple, db_path: Path | None) -> PersonalityReflection | None:
    conn = get_conn(db_path)
    try:
        row = conn.execute(query, params).fetchone()
        return _row_to_reflection(row) if row else None
    finally:
        conn.close()


def get_reflection(reflection_id: str, db_path: Path | None = None) -> PersonalityReflection | None:
    return _fetch_one("SELECT * FROM personality_reflections WHERE id = ?", (reflection_id,), db_path)


def get_active_reflection(user_id: str, db_path: Path | None = None) -> PersonalityReflection | None:
    """The user's pending or processing reflection, if any."""
    return _fetch_one(
        """SELECT * FROM personality_reflections
           WHERE user_id = ? AND status IN ('pending', 'processing')
           ORDER BY created_at DESC LIMIT 1""",
        (user_id,),
        db_path,
    )


def get_latest_completed(user_id: str, db_path: Path | None = None) -> PersonalityReflection | None:
    return _fetch_one(
        """SELECT * FROM personality_reflections
           WHERE user_id = ? AND status = 'completed'
           ORDER BY created_at DESC LIMIT 1""",
        (user_id,),
        db_path,
    )


def create_reflection(
    user_id: str, tier: ReflectionTier | str, db_path: Path | None = None
) -> tuple[PersonalityReflection, bool]:
    """Create a pending reflection unless one is already active.

    Returns ``(reflection, created)``. At most one active reflection per user
    is enforced by a partial unique index, so a concurrent request that loses
    the insert gets the winner's record back.
    """
    tier = ReflectionTier(tier)
    reflection_id = uuid.uuid4().hex
    now = utcnow_iso()
    conn = get_conn(db_path)
    try:
        conn.execute(
            """INSERT INTO personality_reflections
               (id, user_id, tier, status, progress, current_section, created_at, updated_at)
               VALUES (?, ?, ?, ?, 0, ?, ?, ?)""",
            (reflection_id, user_id, tier.value, ReflectionStatus.PENDING.value, QUEUED_LABEL, now, now),
        )
        conn.commit()
    except sqlite3.IntegrityError:
        active = get_active_reflection(user_id, db_path)
        if active is None:
            raise
        return active, False
    finally:
        conn.close()
    logger.info("reflection.created", user_id=user_id, reflection_id=reflection_id, tier=tier.value)
    return get_reflection(reflection_id, db_path), True


_ACTIVE = (ReflectionStatus.PENDING.value, ReflectionStatus.PROCESSING.value)


def _update(reflection_id: str, fields: dict, allowed: tuple[str, ...], db_path: Path | None) -> bool:
    """Apply ``fields`` only while the record's status is in ``allowed``.

    Terminal records are never written again; returns False when the write was skipped.
    """
    fields = {**fields, "updated_at": utcnow_iso()}
    assignments = ", ".join(f"{name} = ?" for name in fields)
    placeholders = ", ".join("?" for _ in allowed)
    conn = get_conn(db_path)
    try:
        cur = conn.execute(
            f"UPDATE personality_reflections SET {assignments} WHERE id = ? AND status IN ({placeholders})",
            (*fields.values(), reflection_id, *allowed),
        )
        conn.commit()
        updated = cur.rowcount > 0
    finally:
        conn.close()
    if not updated:
        logger.warning("reflection.write_skipped", reflection_id=reflection_id, fields=sorted(fields))
    return updated


def mark_processing(reflection_id: str, db_path: Path | None = None) -> bool:
    return _update(
        reflection_id,
        {"status": ReflectionStatus.PROCESSING.value, "progress": 5, "current_section": "Initializing analysis..."},
        (ReflectionStatus.PENDING.value,),
        db_path,
    )


def update_progress(reflection_id: str, progress: int, current_section: str, db_path: Path | None = None) -> bool:
    return _update(reflection_id, {"progress": progress, "current_section": current_section}, _ACTIVE, db_path)


def complete_reflection(reflection_id: str, profile: ReflectionProfile, db_path: Path | None = None) -> bool:
    """Write the whole profile and flip to completed in one statement."""
    fields = {
        "status": ReflectionStatus.COMPLETED.value,
        "progress": 100,
        "current_section": None,
        "error_message": None,
        "summary": profile.summary,
        "core_traits": dumps(profile.core_traits.model_dump(by_alias=True)),
        "holy_shit_moment": profile.holy_shit_moment,
        "growth_leverage_point": profile.growth_leverage_point,
        "statistics": dumps(profile.statistics.model_dump(by_alias=True)),
    }
    for name in SECTION_FIELDS:
        fields[name] = dumps(getattr(profile, name))
    return _update(reflection_id, fields, _ACTIVE, db_path)


def fail_reflection(reflection_id: str, error_message: str, db_path: Path | None = None) -> bool:
    return _update(
        reflection_id,
        {"status": ReflectionStatus.FAILED.value, "progress": 0, "error_message": error_message},
        _ACTIVE,
        db_path,
    )


def reap_stale_reflections(
    max_age_minutes: int = 30, now: datetime | None = None, db_path: Path | None = None
) -> int:
    """Fail pending/processing records that haven't moved in ``max_age_minutes``.

    Jobs live in process memory, so records left active by a crash or restart
    would otherwise block the user from ever starting a new reflection.
    """
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(minutes=max_age_minutes)
    conn = get_conn(db_path)
    try:
        cur = conn.execute(
            """UPDATE personality_reflections
               SET status = 'failed', progress = 0, error_message = ?, updated_at = ?
               WHERE status IN ('pending', 'processing') AND updated_at < ?""",
            (INTERRUPTED_MESSAGE, utcnow_iso(), to_iso(cutoff)),
        )
        conn.commit()
        reaped = cur.rowcount
    finally:
        conn.close()
    if reaped:
        logger.warning("reflection.reaped_stale", count=reaped, max_age_minutes=max_age_minutes)
    return reaped
