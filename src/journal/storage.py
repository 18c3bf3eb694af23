"""Journal entry persistence in the shared SQLite database."""

import uuid
from datetime import datetime
from pathlib import Path

import structlog

from db import get_conn, to_iso

logger = structlog.get_logger()


def _row_to_entry(row) -> dict:
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "content": row["content"],
        "prompt": row["prompt"],
        "word_count": row["word_count"],
        "created_at": row["created_at"],
    }


class JournalStorage:
    """Per-user journal entries, newest first."""

    def __init__(self, user_id: str, db_path: Path | None = None):
        self.user_id = user_id
        self.db_path = db_path

    def create(self, content: str, prompt: str | None = None, created_at: datetime | None = None) -> dict:
        """Insert a journal entry and return it."""
        content = content.strip()
        if not content:
            raise ValueError("Journal content cannot be empty")

        entry = {
            "id": uuid.uuid4().hex,
            "user_id": self.user_id,
            "content": content,
            "prompt": prompt,
            "word_count": len(content.split()),
            "created_at": to_iso(created_at),
        }
        conn = get_conn(self.db_path)
        try:
            conn.execute(
                """INSERT INTO journal_entries (id, user_id, content, prompt, word_count, created_at)
                   VALUES (:id, :user_id, :content, :prompt, :word_count, :created_at)""",
                entry,
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("journal.entry_created", user_id=self.user_id, entry_id=entry["id"], words=entry["word_count"])
        return entry

    def get(self, entry_id: str) -> dict | None:
        conn = get_conn(self.db_path)
        try:
            row = conn.execute(
                "SELECT * FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, self.user_id),
            ).fetchone()
            return _row_to_entry(row) if row else None
        finally:
            conn.close()

    def list_entries(self, limit: int | None = 50, since: datetime | None = None) -> list[dict]:
        """Entries newest first, optionally only those created at or after ``since``."""
        query = "SELECT * FROM journal_entries WHERE user_id = ?"
        params: list = [self.user_id]
        if since is not None:
            query += " AND created_at >= ?"
            params.append(to_iso(since))
        query += " ORDER BY created_at DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = get_conn(self.db_path)
        try:
            return [_row_to_entry(r) for r in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    def count(self) -> int:
        conn = get_conn(self.db_path)
        try:
            return conn.execute(
                "SELECT COUNT(*) FROM journal_entries WHERE user_id = ?", (self.user_id,)
            ).fetchone()[0]
        finally:
            conn.close()

    def delete(self, entry_id: str) -> bool:
        conn = get_conn(self.db_path)
        try:
            cur = conn.execute(
                "DELETE FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, self.user_id),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()
