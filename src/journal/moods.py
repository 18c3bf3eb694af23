"""Mood check-ins: a label, an intensity 0-100, optional note and activities."""

import uuid
from datetime import datetime
from pathlib import Path

from db import dumps, get_conn, loads, to_iso


class MoodStore:
    def __init__(self, user_id: str, db_path: Path | None = None):
        self.user_id = user_id
        self.db_path = db_path

    def add(
        self,
        mood: str,
        intensity: int,
        note: str | None = None,
        activities: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> dict:
        mood = mood.strip()
        if not mood:
            raise ValueError("Mood label cannot be empty")
        if not 0 <= intensity <= 100:
            raise ValueError("Intensity must be between 0 and 100")

        entry = {
            "id": uuid.uuid4().hex,
            "user_id": self.user_id,
            "mood": mood,
            "intensity": intensity,
            "note": note,
            "activities": activities or [],
            "created_at": to_iso(created_at),
        }
        conn = get_conn(self.db_path)
        try:
            conn.execute(
                """INSERT INTO mood_entries (id, user_id, mood, intensity, note, activities, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    entry["id"],
                    self.user_id,
                    mood,
                    intensity,
                    note,
                    dumps(entry["activities"]),
                    entry["created_at"],
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return entry

    def list_entries(self, limit: int | None = 50) -> list[dict]:
        """Mood entries newest first."""
        query = "SELECT * FROM mood_entries WHERE user_id = ? ORDER BY created_at DESC"
        params: list = [self.user_id]
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        conn = get_conn(self.db_path)
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [
            {
                "id": r["id"],
                "user_id": r["user_id"],
                "mood": r["mood"],
                "intensity": r["intensity"],
                "note": r["note"],
                "activities": loads(r["activities"], []),
                "created_at": r["created_at"],
            }
            for r in rows
        ]
