"""Tests for reflection corpus statistics, streaks and similarity."""

from datetime import datetime, timedelta, timezone

import pytest
from helpers import seed_conversation, seed_journals

from journal import MoodStore
from memory import AbstractionLevel, FactStore
from reflection.prompts import build_cross_source_summary, build_user_prompt, format_facts, format_moods
from reflection.statistics import (
    ReflectionCorpus,
    calculate_streak,
    compute_statistics,
    gather_corpus,
    has_sufficient_data,
    jaccard_similarity,
)


def _iso(days_ago: float, base=datetime(2024, 3, 13, 12, tzinfo=timezone.utc)) -> str:
    return (base - timedelta(days=days_ago)).isoformat()


class TestStreak:
    def test_empty(self):
        assert calculate_streak([]) == 0

    def test_single_entry(self):
        assert calculate_streak([_iso(0)]) == 1

    def test_consecutive_days(self):
        assert calculate_streak([_iso(0), _iso(1), _iso(2)]) == 3

    def test_gap_breaks(self):
        assert calculate_streak([_iso(0), _iso(1), _iso(3), _iso(4)]) == 2

    def test_same_day_duplicates_neither_extend_nor_break(self):
        assert calculate_streak([_iso(0), _iso(0.1), _iso(1), _iso(1.2), _iso(2)]) == 3

    def test_unsorted_input(self):
        assert calculate_streak([_iso(2), _iso(0), _iso(1)]) == 3

    def test_days_are_utc(self):
        late = "2024-03-12T23:30:00-05:00"  # 2024-03-13 04:30 UTC
        assert calculate_streak(["2024-03-13T10:00:00+00:00", late]) == 1


class TestJaccard:
    def test_identical(self):
        assert jaccard_similarity("avoids conflict with family", "avoids conflict with family") == 1.0

    def test_short_words_ignored(self):
        assert jaccard_similarity("a an the of", "to be or not") == 0.0

    def test_case_insensitive_partial_overlap(self):
        # {avoids, conflict, with, family} vs {avoids, conflict, work}: 2 / 5
        assert jaccard_similarity("Avoids CONFLICT with family", "avoids conflict at work") == pytest.approx(0.4)


class TestComputeStatistics:
    def test_counts_and_engagement(self, user_id, now):
        seed_journals(user_id, 3, now)
        seed_conversation(user_id, 2, now)
        moods = MoodStore(user_id)
        moods.add("anxious", 40, created_at=now - timedelta(days=1))
        moods.add("calm", 75, created_at=now - timedelta(days=2))
        moods.add("anxious", 62, created_at=now - timedelta(days=3))
        FactStore(user_id).add("Works late before reviews", "work")

        stats = compute_statistics(gather_corpus(user_id))
        assert stats.total_conversations == 1
        assert stats.total_messages == 4
        assert stats.total_journal_entries == 3
        assert stats.total_mood_entries == 3
        assert stats.total_memory_facts == 1
        assert stats.average_mood_score == 59.0
        assert stats.journal_streak == 3
        assert stats.most_common_emotions == ["anxious", "calm"]
        assert stats.most_active_categories == ["work"]
        # 10*1 + 15*3 + 5*3 + 2*1
        assert stats.engagement_score == 72

    def test_engagement_capped_at_100(self):
        corpus = ReflectionCorpus(user_id="u", conversation_count=20)
        assert compute_statistics(corpus).engagement_score == 100

    def test_average_mood_one_decimal(self):
        moods = [{"mood": "ok", "intensity": v, "created_at": _iso(0)} for v in (50, 50, 51)]
        assert compute_statistics(ReflectionCorpus(user_id="u", mood_entries=moods)).average_mood_score == 50.3

    def test_empty_corpus(self):
        stats = compute_statistics(ReflectionCorpus(user_id="u"))
        assert stats.average_mood_score == 0.0
        assert stats.journal_streak == 0
        assert stats.engagement_score == 0

    def test_superseded_facts_excluded(self, user_id):
        store = FactStore(user_id)
        old = store.add("Old belief", "identity")
        store.add("New belief", "identity")
        store.supersede(old.id)
        assert compute_statistics(gather_corpus(user_id)).total_memory_facts == 1


class TestSufficiency:
    @pytest.mark.parametrize(
        "messages,journals,expected",
        [(9, 2, False), (10, 0, True), (0, 3, True), (0, 0, False)],
    )
    def test_thresholds(self, messages, journals, expected):
        corpus = ReflectionCorpus(
            user_id="u",
            messages=[{"role": "user", "content": "m", "created_at": _iso(0)}] * messages,
            journal_entries=[{"content": "j", "created_at": _iso(i)} for i in range(journals)],
        )
        assert has_sufficient_data(compute_statistics(corpus)) is expected


class TestPromptContext:
    def test_facts_grouped_by_level(self, user_id):
        store = FactStore(user_id)
        store.add("Has two siblings", "family", confidence=90)
        store.add("Believes rest must be earned", "work", confidence=70,
                  abstraction_level=AbstractionLevel.INFERRED_BELIEF)
        text = format_facts(store.get_active())
        assert text.index("OBSERVABLE FACTS:") < text.index("INFERRED BELIEFS:")
        assert "- Has two siblings (family, confidence: 90%)" in text
        assert "DEFENSE MECHANISMS" not in text

    def test_mood_line_format(self):
        line = format_moods([
            {"mood": "tense", "intensity": 70, "note": "deadline", "activities": ["work", "coffee"],
             "created_at": "2024-03-10T08:00:00+00:00"}
        ])
        assert line == "Mood (2024-03-10): tense (70%) - deadline [work, coffee]"

    def test_cross_source_summary_sections(self):
        corpus = ReflectionCorpus(
            user_id="u",
            messages=[{"role": "user" if i % 2 == 0 else "assistant", "content": "m"} for i in range(6)],
            journal_entries=[{"content": "j", "created_at": _iso(d)} for d in (4, 2, 0)],
            mood_entries=[{"mood": m, "intensity": 60} for m in ("low", "low", "ok")],
        )
        summary = build_cross_source_summary(corpus)
        assert summary.startswith("**CROSS-SOURCE PATTERNS:**")
        assert "MOOD TRENDS: average intensity 60.0%, most common mood 'low'" in summary
        assert "CONVERSATION ACTIVITY: 3 of 6 messages" in summary
        assert "on average 2.0 days apart" in summary
        assert "MEMORY FACTS" not in summary

    def test_user_prompt_uses_newest_slices(self):
        corpus = ReflectionCorpus(
            user_id="u",
            messages=[{"role": "user", "content": f"msg-{i:03d}", "created_at": _iso(0)} for i in range(120)],
        )
        prompt = build_user_prompt(corpus, compute_statistics(corpus))
        assert "msg-119" in prompt
        assert "msg-020" in prompt
        assert "msg-019" not in prompt
        assert '"totalMessages": 120' in prompt
        assert prompt.rstrip().endswith("}")
