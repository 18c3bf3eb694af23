"""Recent-content window used as input for category scoring."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cli.config_models import ScoringConfig
from db import to_iso
from journal.storage import JournalStorage
from shared_types import MessageRole
from web import conversation_store


@dataclass
class RecentContent:
    user_id: str
    lookback_days: int
    cutoff: datetime
    journal_entries: list[dict] = field(default_factory=list)  # newest first
    messages: list[dict] = field(default_factory=list)  # newest first
    min_journal_entries: int = 2
    min_user_messages: int = 5

    @property
    def user_message_count(self) -> int:
        return sum(1 for m in self.messages if m["role"] == MessageRole.USER)

    @property
    def has_minimum_data(self) -> bool:
        return (
            len(self.journal_entries) >= self.min_journal_entries
            or self.user_message_count >= self.min_user_messages
        )

    def contributors(self) -> dict:
        return {
            "journalCount": len(self.journal_entries),
            "messageCount": self.user_message_count,
            "lookbackDays": self.lookback_days,
        }


def aggregate_recent_content(
    user_id: str,
    lookback_days: int,
    config: ScoringConfig | None = None,
    now: datetime | None = None,
    db_path: Path | None = None,
) -> RecentContent:
    """Collect journal entries and chat messages created inside the lookback window.

    Entries are filtered by date before capping, so the caps only ever drop
    the oldest in-window items.
    """
    config = config or ScoringConfig()
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=lookback_days)
    cutoff_iso = to_iso(cutoff)

    journals = JournalStorage(user_id, db_path=db_path).list_entries(
        limit=config.journal_limit, since=cutoff
    )

    messages: list[dict] = []
    for conv in conversation_store.list_conversations(
        user_id, limit=config.conversation_limit, db_path=db_path
    ):
        for msg in conversation_store.get_messages(conv["id"], limit=None, db_path=db_path):
            if msg["created_at"] >= cutoff_iso:
                messages.append(msg)
    messages.sort(key=lambda m: m["created_at"], reverse=True)

    return RecentContent(
        user_id=user_id,
        lookback_days=lookback_days,
        cutoff=cutoff,
        journal_entries=journals,
        messages=messages[: config.message_limit],
        min_journal_entries=config.min_journal_entries,
        min_user_messages=config.min_user_messages,
    )
