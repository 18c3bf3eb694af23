"""User records, upserted from JWT claims on every authenticated request."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from db import get_conn

logger = structlog.get_logger()


def get_or_create_user(
    user_id: str,
    email: str | None = None,
    name: str | None = None,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Upsert user on login. Returns user dict."""
    conn = get_conn(db_path)
    try:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row:
            if email or name:
                conn.execute(
                    "UPDATE users SET email = COALESCE(?, email), name = COALESCE(?, name) WHERE id = ?",
                    (email, name, user_id),
                )
                conn.commit()
                row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return dict(row)

        now = datetime.now(timezone.utc).isoformat()
        conn.execute(
            "INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)",
            (user_id, email, name, now),
        )
        conn.commit()
        logger.info("user_store.user_created", user_id=user_id)
        return {"id": user_id, "email": email, "name": name, "created_at": now}
    finally:
        conn.close()


def get_user(user_id: str, db_path: Path | None = None) -> dict | None:
    conn = get_conn(db_path)
    try:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None
    finally:
        conn.close()


def delete_user(user_id: str, db_path: Path | None = None) -> bool:
    """Delete a user; every owned record goes with it via ON DELETE CASCADE."""
    conn = get_conn(db_path)
    try:
        cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()
