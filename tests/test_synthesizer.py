"""Tests for personality reflection synthesis."""

import pytest
from helpers import make_llm, seed_conversation, seed_journals

from cli.config_models import ReflectionConfig
from errors import AIServiceError
from llm import LLMError, LLMRateLimitError
from reflection.models import MAX_SECTION_ITEMS, visible_sections
from reflection.synthesizer import ReflectionSynthesizer, clean_sections


class TestCleanSections:
    def test_filler_and_non_strings_dropped(self):
        cleaned = clean_sections({"strengths": ["Insufficient depth", "  ", 42, "Reads rooms quickly"]})
        assert cleaned == {"strengths": ["Reads rooms quickly"]}

    def test_within_section_duplicates(self):
        cleaned = clean_sections({
            "strengths": [
                "Notices relationship shifts early and accurately",
                "Notices relationship shifts early, accurately",
            ]
        })
        assert cleaned["strengths"] == ["Notices relationship shifts early and accurately"]

    def test_cross_section_first_occurrence_wins(self):
        item = "Withdraws after criticism and rehearses comebacks alone"
        cleaned = clean_sections({"behavioral_patterns": [item], "emotional_patterns": [item, "Feels dread on Sundays"]})
        assert cleaned["behavioral_patterns"] == [item]
        assert cleaned["emotional_patterns"] == ["Feels dread on Sundays"]

    def test_truncated_to_max(self):
        items = [f"distinct{i}word observation{i}text" for i in range(20)]
        assert len(clean_sections({"growth_areas": items})["growth_areas"]) == MAX_SECTION_ITEMS

    def test_threshold_is_strictly_greater(self):
        # two shared words out of four distinct: similarity 0.5
        cleaned = clean_sections(
            {"strengths": ["steady patient listener", "steady patient planner"]}, threshold=0.5
        )
        assert len(cleaned["strengths"]) == 2


class TestVisibleSections:
    def test_free(self):
        assert visible_sections("free") == ["behavioralPatterns", "growthAreas"]

    def test_premium_includes_capstone(self):
        names = visible_sections("premium")
        assert len(names) == 11
        assert names[-2:] == ["holyShitMoment", "growthLeveragePoint"]


class TestSynthesize:
    def test_insufficient_data_returns_none_without_llm(self, user_id, now, mock_llm):
        seed_journals(user_id, 2, now)
        assert ReflectionSynthesizer(mock_llm).synthesize(user_id) is None
        mock_llm.generate.assert_not_called()

    def test_ten_messages_are_enough(self, user_id, now, reflection_payload):
        seed_conversation(user_id, 5, now)
        assert ReflectionSynthesizer(make_llm(reflection_payload)).synthesize(user_id) is not None

    def test_valid_profile(self, user_id, now, reflection_payload):
        seed_journals(user_id, 3, now)
        llm = make_llm(reflection_payload)
        profile = ReflectionSynthesizer(llm).synthesize(user_id, "premium")

        assert profile.summary.startswith("A vigilant achiever")
        assert profile.core_traits.archetype == "The Guarded Achiever"
        assert profile.core_traits.big5.emotional_stability == 35
        assert len(profile.behavioral_patterns) == 2
        assert profile.holy_shit_moment == "You audition for love you already have."
        assert profile.statistics.total_journal_entries == 3
        assert profile.statistics.journal_streak == 3

        kwargs = llm.generate.call_args.kwargs
        assert kwargs["json_mode"] is True
        assert kwargs["temperature"] == 0.7
        assert "personality analyst" in kwargs["system"]
        prompt = kwargs["messages"][0]["content"]
        assert "**CROSS-SOURCE PATTERNS:**" in prompt
        assert "Journal entry (2024-03-13):" in prompt

    def test_quality_pass_applied(self, user_id, now, reflection_payload):
        seed_journals(user_id, 3, now)
        duplicate = reflection_payload["behavioralPatterns"][0]
        payload = {
            **reflection_payload,
            "strengths": ["Insufficient depth", duplicate, "Keeps promises to strangers"],
        }
        profile = ReflectionSynthesizer(make_llm(payload)).synthesize(user_id)
        assert profile.strengths == ["Keeps promises to strangers"]

    def test_big5_clamped_and_defaulted(self, user_id, now, reflection_payload):
        seed_journals(user_id, 3, now)
        payload = {
            **reflection_payload,
            "coreTraits": {"big5": {"openness": 140, "extraversion": -5}, "dominantTraits": list("abcdefg")},
        }
        traits = ReflectionSynthesizer(make_llm(payload)).synthesize(user_id).core_traits
        assert traits.big5.openness == 100
        assert traits.big5.extraversion == 0
        assert traits.big5.agreeableness == 50
        assert traits.dominant_traits == ["a", "b", "c", "d", "e"]

    @pytest.mark.parametrize("openness", ["inf", "-Infinity", "nan"])
    def test_non_finite_trait_is_ai_error(self, user_id, now, reflection_payload, openness):
        seed_journals(user_id, 3, now)
        payload = {**reflection_payload, "coreTraits": {"big5": {"openness": openness}}}
        with pytest.raises(AIServiceError, match="Failed to generate personality reflection"):
            ReflectionSynthesizer(make_llm(payload)).synthesize(user_id)

    def test_overflowing_trait_literal_is_ai_error(self, user_id, now):
        seed_journals(user_id, 3, now)
        reply = '{"summary": "ok", "coreTraits": {"big5": {"openness": 1e999}}}'
        with pytest.raises(AIServiceError, match="Failed to generate personality reflection"):
            ReflectionSynthesizer(make_llm(reply)).synthesize(user_id)

    @pytest.mark.parametrize(
        "reply",
        [
            "I'd rather not",
            '{"summary": "", "coreTraits": {}}',
            '{"summary": "ok", "coreTraits": {}, "strengths": "not a list"}',
            '{"coreTraits": {}}',
        ],
    )
    def test_unusable_reply_is_ai_error(self, user_id, now, reply):
        seed_journals(user_id, 3, now)
        with pytest.raises(AIServiceError, match="Failed to generate personality reflection"):
            ReflectionSynthesizer(make_llm(reply)).synthesize(user_id)

    def test_llm_error_wrapped(self, user_id, now, mock_llm):
        seed_journals(user_id, 3, now)
        mock_llm.generate.side_effect = LLMError("connection reset")
        with pytest.raises(AIServiceError, match="connection reset"):
            ReflectionSynthesizer(mock_llm).synthesize(user_id)

    def test_rate_limit_propagates(self, user_id, now, mock_llm):
        seed_journals(user_id, 3, now)
        mock_llm.generate.side_effect = LLMRateLimitError("429 Too Many Requests")
        with pytest.raises(LLMRateLimitError):
            ReflectionSynthesizer(mock_llm).synthesize(user_id)

    def test_no_provider(self, user_id, now):
        seed_journals(user_id, 3, now)
        with pytest.raises(AIServiceError):
            ReflectionSynthesizer(None).synthesize(user_id)

    def test_progress_reported_in_order(self, user_id, now, reflection_payload):
        seed_journals(user_id, 3, now)
        seen = []
        ReflectionSynthesizer(make_llm(reflection_payload)).synthesize(
            user_id, on_progress=lambda p, label: seen.append(p)
        )
        assert seen == [10, 30, 80, 95]

    def test_config_limits_prompt(self, user_id, now, reflection_payload):
        seed_journals(user_id, 5, now)
        llm = make_llm(reflection_payload)
        ReflectionSynthesizer(llm, config=ReflectionConfig(journal_limit=2)).synthesize(user_id)
        prompt = llm.generate.call_args.kwargs["messages"][0]["content"]
        assert "Last 2 entries" in prompt
        assert prompt.count("Journal entry (") == 2
