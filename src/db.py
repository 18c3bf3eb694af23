"""Shared SQLite helpers and the schema."""

import json
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

_DEFAULT_DB_PATH = Path(os.environ.get("INNERTRUTH_HOME", Path.home() / "innertruth")) / "innertruth.db"

SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT,
        name TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS conversations (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_conv_user ON conversations(user_id, updated_at DESC);

    CREATE TABLE IF NOT EXISTS conversation_messages (
        id TEXT PRIMARY KEY,
        conversation_id TEXT NOT NULL,
        role TEXT NOT NULL CHECK(role IN ('user','assistant')),
        content TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL,
        FOREIGN KEY (conversation_id) REFERENCES conversations(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_msg_conv ON conversation_messages(conversation_id, created_at ASC);

    CREATE TABLE IF NOT EXISTS journal_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        content TEXT NOT NULL,
        prompt TEXT,
        word_count INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_journal_user ON journal_entries(user_id, created_at DESC);

    CREATE TABLE IF NOT EXISTS mood_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        mood TEXT NOT NULL,
        intensity INTEGER NOT NULL CHECK(intensity BETWEEN 0 AND 100),
        note TEXT,
        activities TEXT NOT NULL DEFAULT '[]',
        created_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_mood_user ON mood_entries(user_id, created_at DESC);

    CREATE TABLE IF NOT EXISTS memory_facts (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        fact_content TEXT NOT NULL,
        category TEXT NOT NULL,
        confidence INTEGER NOT NULL DEFAULT 50,
        abstraction_level TEXT NOT NULL DEFAULT 'raw_fact',
        status TEXT NOT NULL DEFAULT 'active' CHECK(status IN ('active','superseded')),
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_facts_user ON memory_facts(user_id, status);

    CREATE TABLE IF NOT EXISTS user_categories (
        user_id TEXT NOT NULL,
        category_id TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'active',
        baseline_score INTEGER,
        goal_score INTEGER,
        selected_at TIMESTAMP NOT NULL,
        PRIMARY KEY (user_id, category_id),
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );

    CREATE TABLE IF NOT EXISTS category_scores (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        category_id TEXT NOT NULL,
        period_type TEXT NOT NULL CHECK(period_type IN ('daily','weekly')),
        period_start TIMESTAMP NOT NULL,
        period_end TIMESTAMP NOT NULL,
        score INTEGER NOT NULL,
        delta INTEGER,
        reasoning TEXT NOT NULL,
        key_patterns TEXT NOT NULL DEFAULT '[]',
        progress_indicators TEXT NOT NULL DEFAULT '[]',
        areas_for_growth TEXT NOT NULL DEFAULT '[]',
        confidence TEXT NOT NULL CHECK(confidence IN ('low','medium','high')),
        evidence_snippets TEXT NOT NULL DEFAULT '[]',
        dynamic_nudge TEXT,
        contributors TEXT NOT NULL DEFAULT '{}',
        generated_at TIMESTAMP NOT NULL,
        UNIQUE (user_id, category_id, period_type, period_start),
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_scores_lookup
        ON category_scores(user_id, category_id, period_type, period_start DESC);

    CREATE TABLE IF NOT EXISTS category_insights (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        category_id TEXT NOT NULL,
        insight_type TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        priority INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_insights_user ON category_insights(user_id, category_id, created_at DESC);

    CREATE TABLE IF NOT EXISTS personality_reflections (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        tier TEXT NOT NULL CHECK(tier IN ('free','standard','premium')),
        status TEXT NOT NULL CHECK(status IN ('pending','processing','completed','failed')),
        progress INTEGER NOT NULL DEFAULT 0,
        current_section TEXT,
        error_message TEXT,
        summary TEXT NOT NULL DEFAULT '',
        core_traits TEXT NOT NULL DEFAULT '{}',
        behavioral_patterns TEXT NOT NULL DEFAULT '[]',
        emotional_patterns TEXT NOT NULL DEFAULT '[]',
        relationship_dynamics TEXT NOT NULL DEFAULT '[]',
        coping_mechanisms TEXT NOT NULL DEFAULT '[]',
        growth_areas TEXT NOT NULL DEFAULT '[]',
        strengths TEXT NOT NULL DEFAULT '[]',
        blind_spots TEXT NOT NULL DEFAULT '[]',
        values_and_beliefs TEXT NOT NULL DEFAULT '[]',
        therapeutic_insights TEXT NOT NULL DEFAULT '[]',
        holy_shit_moment TEXT,
        growth_leverage_point TEXT,
        statistics TEXT,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    CREATE INDEX IF NOT EXISTS idx_reflections_user ON personality_reflections(user_id, created_at DESC);
    CREATE UNIQUE INDEX IF NOT EXISTS idx_reflections_one_active
        ON personality_reflections(user_id) WHERE status IN ('pending','processing');
"""


def wal_connect(db_path: str | Path, row_factory: bool = False) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode.

    Args:
        db_path: Path to database file.
        row_factory: If True, set conn.row_factory = sqlite3.Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    if row_factory:
        conn.row_factory = sqlite3.Row
    return conn


def get_db_path() -> Path:
    return _DEFAULT_DB_PATH


def set_db_path(path: str | Path) -> None:
    """Point every store at a different database file (config / CLI override)."""
    global _DEFAULT_DB_PATH
    _DEFAULT_DB_PATH = Path(path).expanduser()


def get_conn(db_path: Path | None = None) -> sqlite3.Connection:
    """Row-factory connection with foreign keys enforced."""
    path = Path(db_path) if db_path else _DEFAULT_DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = wal_connect(path, row_factory=True)
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: Path | None = None) -> None:
    """Create tables if they don't exist."""
    conn = get_conn(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_iso(value: datetime | None) -> str:
    """Normalize a datetime to the UTC ISO string stored in every table."""
    if value is None:
        return utcnow_iso()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def dumps(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def loads(raw: str | None, default=None):
    """Decode a JSON column; corrupt or empty values fall back to ``default``."""
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return default
