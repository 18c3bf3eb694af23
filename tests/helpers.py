"""Seeding helpers shared by unit and route tests."""

import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock


def make_llm(payload: dict | str) -> MagicMock:
    llm = MagicMock()
    llm.generate.return_value = payload if isinstance(payload, str) else json.dumps(payload)
    return llm


def seed_journals(user_id: str, count: int, now: datetime, spacing_days: int = 1) -> list[dict]:
    from journal import JournalStorage

    storage = JournalStorage(user_id)
    return [
        storage.create(
            f"Entry {i}: felt tense before the review but named it and slowed down.",
            created_at=now - timedelta(days=i * spacing_days, hours=1),
        )
        for i in range(count)
    ]


def seed_conversation(user_id: str, user_messages: int, now: datetime, assistant_replies: bool = True) -> str:
    from web import conversation_store

    conv = conversation_store.create_conversation(user_id, "Check-in")
    for i in range(user_messages):
        ts = now - timedelta(hours=user_messages - i)
        conversation_store.add_message(conv["id"], "user", f"I keep replaying message {i}", created_at=ts)
        if assistant_replies:
            conversation_store.add_message(
                conv["id"], "assistant", f"What happens in your body at {i}?", created_at=ts + timedelta(minutes=1)
            )
    return conv["id"]
