"""Persistence for category scores, category selections, and category insights."""

import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

import structlog

from db import dumps, get_conn, loads, to_iso, utcnow_iso
from errors import ConflictError

from .models import CategoryScore, CategoryScoreResult

logger = structlog.get_logger()


def _row_to_score(row) -> CategoryScore:
    return CategoryScore(
        id=row["id"],
        user_id=row["user_id"],
        category_id=row["category_id"],
        period_type=row["period_type"],
        period_start=row["period_start"],
        period_end=row["period_end"],
        score=row["score"],
        delta=row["delta"],
        reasoning=row["reasoning"],
        key_patterns=loads(row["key_patterns"], []),
        progress_indicators=loads(row["progress_indicators"], []),
        areas_for_growth=loads(row["areas_for_growth"], []),
        confidence_level=row["confidence"],
        evidence_snippets=loads(row["evidence_snippets"], []),
        dynamic_nudge=row["dynamic_nudge"],
        contributors=loads(row["contributors"], {}),
        generated_at=row["generated_at"],
    )


# --- Scores ---


def insert_score(
    user_id: str,
    category_id: str,
    period_type: str,
    period_start: datetime,
    period_end: datetime,
    result: CategoryScoreResult,
    delta: int | None = None,
    contributors: dict | None = None,
    db_path: Path | None = None,
) -> CategoryScore:
    """Insert one score row.

    Raises:
        sqlite3.IntegrityError: a row for (user, category, period type, period start) exists.
    """
    score_id = uuid.uuid4().hex
    conn = get_conn(db_path)
    try:
        conn.execute(
            """INSERT INTO category_scores
               (id, user_id, category_id, period_type, period_start, period_end, score, delta,
                reasoning, key_patterns, progress_indicators, areas_for_growth, confidence,
                evidence_snippets, dynamic_nudge, contributors, generated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                score_id,
                user_id,
                category_id,
                period_type,
                to_iso(period_start),
                to_iso(period_end),
                result.score,
                delta,
                result.reasoning,
                dumps(result.key_patterns),
                dumps(result.progress_indicators),
                dumps(result.areas_for_growth),
                result.confidence_level.value,
                dumps([s.model_dump() for s in result.evidence_snippets]),
                result.dynamic_nudge,
                dumps(contributors or {}),
                utcnow_iso(),
            ),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM category_scores WHERE id = ?", (score_id,)).fetchone()
        return _row_to_score(row)
    finally:
        conn.close()


def get_score_for_period(
    user_id: str,
    category_id: str,
    period_type: str,
    period_start: datetime,
    db_path: Path | None = None,
) -> CategoryScore | None:
    conn = get_conn(db_path)
    try:
        row = conn.execute(
            """SELECT * FROM category_scores
               WHERE user_id = ? AND category_id = ? AND period_type = ? AND period_start = ?""",
            (user_id, category_id, period_type, to_iso(period_start)),
        ).fetchone()
        return _row_to_score(row) if row else None
    finally:
        conn.close()


def get_previous_score(
    user_id: str,
    category_id: str,
    period_type: str,
    before: datetime,
    db_path: Path | None = None,
) -> CategoryScore | None:
    """Most recent score whose period started before ``before``."""
    conn = get_conn(db_path)
    try:
        row = conn.execute(
            """SELECT * FROM category_scores
               WHERE user_id = ? AND category_id = ? AND period_type = ? AND period_start < ?
               ORDER BY period_start DESC LIMIT 1""",
            (user_id, category_id, period_type, to_iso(before)),
        ).fetchone()
        return _row_to_score(row) if row else None
    finally:
        conn.close()


def list_scores(
    user_id: str,
    category_id: str,
    period_type: str | None = None,
    limit: int = 30,
    since: datetime | None = None,
    db_path: Path | None = None,
) -> list[CategoryScore]:
    """Score history, newest period first."""
    query = "SELECT * FROM category_scores WHERE user_id = ? AND category_id = ?"
    params: list = [user_id, category_id]
    if period_type:
        query += " AND period_type = ?"
        params.append(period_type)
    if since is not None:
        query += " AND period_start >= ?"
        params.append(to_iso(since))
    query += " ORDER BY period_start DESC, generated_at DESC LIMIT ?"
    params.append(limit)

    conn = get_conn(db_path)
    try:
        return [_row_to_score(r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()


def get_latest_score(
    user_id: str, category_id: str, period_type: str, db_path: Path | None = None
) -> CategoryScore | None:
    scores = list_scores(user_id, category_id, period_type, limit=1, db_path=db_path)
    return scores[0] if scores else None


# --- Category selections ---


def select_category(
    user_id: str,
    category_id: str,
    goal_score: int | None = None,
    baseline_score: int | None = None,
    db_path: Path | None = None,
) -> dict:
    """Add a category to the user's selection.

    Raises:
        ConflictError: category already selected.
    """
    now = utcnow_iso()
    conn = get_conn(db_path)
    try:
        conn.execute(
            """INSERT INTO user_categories (user_id, category_id, status, baseline_score, goal_score, selected_at)
               VALUES (?, ?, 'active', ?, ?, ?)""",
            (user_id, category_id, baseline_score, goal_score, now),
        )
        conn.commit()
    except sqlite3.IntegrityError as e:
        raise ConflictError("Category already selected.") from e
    finally:
        conn.close()
    logger.info("scoring.category_selected", user_id=user_id, category_id=category_id)
    return {
        "category_id": category_id,
        "status": "active",
        "baseline_score": baseline_score,
        "goal_score": goal_score,
        "selected_at": now,
    }


def list_user_categories(user_id: str, db_path: Path | None = None) -> list[dict]:
    """Selected categories in the order they were selected."""
    conn = get_conn(db_path)
    try:
        rows = conn.execute(
            """SELECT category_id, status, baseline_score, goal_score, selected_at
               FROM user_categories WHERE user_id = ?
               ORDER BY selected_at ASC, rowid ASC""",
            (user_id,),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def is_category_selected(user_id: str, category_id: str, db_path: Path | None = None) -> bool:
    conn = get_conn(db_path)
    try:
        row = conn.execute(
            "SELECT 1 FROM user_categories WHERE user_id = ? AND category_id = ? AND status = 'active'",
            (user_id, category_id),
        ).fetchone()
        return row is not None
    finally:
        conn.close()


def remove_category(user_id: str, category_id: str, db_path: Path | None = None) -> bool:
    conn = get_conn(db_path)
    try:
        cur = conn.execute(
            "DELETE FROM user_categories WHERE user_id = ? AND category_id = ?",
            (user_id, category_id),
        )
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()


# --- Insights ---


def add_insight(
    user_id: str,
    category_id: str,
    insight_type: str,
    title: str,
    description: str,
    priority: int = 0,
    db_path: Path | None = None,
) -> dict:
    insight = {
        "id": uuid.uuid4().hex,
        "user_id": user_id,
        "category_id": category_id,
        "insight_type": insight_type,
        "title": title,
        "description": description,
        "priority": priority,
        "created_at": utcnow_iso(),
    }
    conn = get_conn(db_path)
    try:
        conn.execute(
            """INSERT INTO category_insights
               (id, user_id, category_id, insight_type, title, description, priority, created_at)
               VALUES (:id, :user_id, :category_id, :insight_type, :title, :description, :priority, :created_at)""",
            insight,
        )
        conn.commit()
    finally:
        conn.close()
    return insight


def list_insights(user_id: str, category_id: str, limit: int = 10, db_path: Path | None = None) -> list[dict]:
    """Insights newest first."""
    conn = get_conn(db_path)
    try:
        rows = conn.execute(
            """SELECT * FROM category_insights WHERE user_id = ? AND category_id = ?
               ORDER BY created_at DESC LIMIT ?""",
            (user_id, category_id, limit),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()
