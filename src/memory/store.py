"""Read access to memory facts produced by the extraction service."""

import uuid
from datetime import datetime
from pathlib import Path

import structlog

from db import get_conn, to_iso
from shared_types import FactStatus

from .models import AbstractionLevel, MemoryFact

logger = structlog.get_logger()


class FactStore:
    """SQLite persistence for one user's memory facts.

    The scoring and reflection pipelines only read active facts; ``add`` and
    ``supersede`` exist for the extraction service and for seeding data.
    """

    def __init__(self, user_id: str, db_path: str | Path | None = None):
        self.user_id = user_id
        self.db_path = db_path

    def add(
        self,
        fact_content: str,
        category: str,
        confidence: int = 50,
        abstraction_level: AbstractionLevel | str = AbstractionLevel.RAW_FACT,
        created_at: datetime | None = None,
    ) -> MemoryFact:
        fact = MemoryFact(
            id=uuid.uuid4().hex[:16],
            user_id=self.user_id,
            fact_content=fact_content.strip(),
            category=category,
            confidence=max(0, min(100, int(confidence))),
            abstraction_level=AbstractionLevel(abstraction_level),
        )
        ts = to_iso(created_at)
        conn = get_conn(self.db_path)
        try:
            conn.execute(
                """INSERT INTO memory_facts
                   (id, user_id, fact_content, category, confidence, abstraction_level, status, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    fact.id,
                    self.user_id,
                    fact.fact_content,
                    fact.category,
                    fact.confidence,
                    fact.abstraction_level.value,
                    fact.status.value,
                    ts,
                    ts,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        fact.created_at = fact.updated_at = datetime.fromisoformat(ts)
        return fact

    def supersede(self, fact_id: str) -> bool:
        conn = get_conn(self.db_path)
        try:
            cur = conn.execute(
                "UPDATE memory_facts SET status = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (FactStatus.SUPERSEDED.value, to_iso(None), fact_id, self.user_id),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    def get_active(self, category: str | None = None, limit: int | None = None) -> list[MemoryFact]:
        """Active facts, highest confidence first."""
        query = "SELECT * FROM memory_facts WHERE user_id = ? AND status = ?"
        params: list = [self.user_id, FactStatus.ACTIVE.value]
        if category:
            query += " AND category = ?"
            params.append(category)
        query += " ORDER BY confidence DESC, updated_at DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = get_conn(self.db_path)
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [self._row_to_fact(r) for r in rows]

    @staticmethod
    def _row_to_fact(row) -> MemoryFact:
        return MemoryFact(
            id=row["id"],
            user_id=row["user_id"],
            fact_content=row["fact_content"],
            category=row["category"],
            confidence=row["confidence"],
            abstraction_level=AbstractionLevel(row["abstraction_level"]),
            status=FactStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
