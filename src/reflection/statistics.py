"""Corpus loading and engagement statistics for personality reflections."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path

from journal import JournalStorage, MoodStore
from memory import FactStore, MemoryFact
from scoring.summary import round_half_up
from web import conversation_store

from .models import ReflectionStatistics


@dataclass
class ReflectionCorpus:
    """Everything a user has shared, oldest first."""

    user_id: str
    conversation_count: int = 0
    messages: list[dict] = field(default_factory=list)
    journal_entries: list[dict] = field(default_factory=list)
    mood_entries: list[dict] = field(default_factory=list)
    facts: list[MemoryFact] = field(default_factory=list)


def gather_corpus(user_id: str, db_path: Path | None = None) -> ReflectionCorpus:
    return ReflectionCorpus(
        user_id=user_id,
        conversation_count=conversation_store.count_conversations(user_id, db_path=db_path),
        messages=conversation_store.list_user_messages(user_id, db_path=db_path),
        journal_entries=list(reversed(JournalStorage(user_id, db_path).list_entries(limit=None))),
        mood_entries=list(reversed(MoodStore(user_id, db_path).list_entries(limit=None))),
        facts=FactStore(user_id, db_path).get_active(),
    )


def _to_utc_date(value: str | datetime) -> date:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date()


def calculate_streak(timestamps: list[str | datetime]) -> int:
    """Consecutive-day journaling streak ending at the newest entry.

    Several entries on the same day neither extend nor break the streak.

    >>> calculate_streak(["2024-03-03T09:00:00+00:00", "2024-03-02T21:00:00+00:00", "2024-02-28T08:00:00+00:00"])
    2
    """
    if not timestamps:
        return 0
    days = sorted((_to_utc_date(t) for t in timestamps), reverse=True)
    streak = 1
    for newer, older in zip(days, days[1:]):
        gap = (newer - older).days
        if gap == 1:
            streak += 1
        elif gap > 1:
            break
    return streak


def _top(values: list[str], n: int = 5) -> list[str]:
    return [value for value, _ in Counter(values).most_common(n)]


def compute_statistics(corpus: ReflectionCorpus) -> ReflectionStatistics:
    moods = corpus.mood_entries
    average_mood = 0.0
    if moods:
        mean = sum(m["intensity"] for m in moods) / len(moods)
        average_mood = round_half_up(mean * 10) / 10

    engagement = round_half_up(
        corpus.conversation_count * 10
        + len(corpus.journal_entries) * 15
        + len(moods) * 5
        + len(corpus.facts) * 2
    )

    return ReflectionStatistics(
        total_conversations=corpus.conversation_count,
        total_messages=len(corpus.messages),
        total_journal_entries=len(corpus.journal_entries),
        total_mood_entries=len(moods),
        total_memory_facts=len(corpus.facts),
        average_mood_score=average_mood,
        journal_streak=calculate_streak([e["created_at"] for e in corpus.journal_entries]),
        most_common_emotions=_top([m["mood"] for m in moods]),
        most_active_categories=_top([f.category for f in corpus.facts]),
        engagement_score=min(100, engagement),
    )


def has_sufficient_data(stats: ReflectionStatistics, min_messages: int = 10, min_journal_entries: int = 3) -> bool:
    return stats.total_messages >= min_messages or stats.total_journal_entries >= min_journal_entries


def jaccard_similarity(a: str, b: str) -> float:
    """Word-set overlap over words longer than three characters."""
    words_a = {w for w in a.lower().split() if len(w) > 3}
    words_b = {w for w in b.lower().split() if len(w) > 3}
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
