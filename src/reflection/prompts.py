"""Prompt templates and context formatting for personality reflections."""

import json
from collections import Counter
from datetime import datetime

from memory import AbstractionLevel

from .models import ReflectionStatistics
from .statistics import ReflectionCorpus

FACT_LEVEL_LABELS = {
    AbstractionLevel.RAW_FACT: "OBSERVABLE FACTS",
    AbstractionLevel.INFERRED_BELIEF: "INFERRED BELIEFS",
    AbstractionLevel.DEFENSE_MECHANISM: "DEFENSE MECHANISMS",
    AbstractionLevel.IFS_PART: "IFS PARTS",
}


class ReflectionPrompts:
    SYSTEM = """You are an unforgiving, world-class personality analyst who has spent 30 years integrating Schema Therapy, Internal Family Systems (IFS), Attachment Theory, evolutionary psychology, psychodynamic defense mechanisms, and developmental trauma research.

YOUR ONLY GOAL: Deliver non-obvious, uncomfortable, high-precision truths that the user has never articulated but will instantly recognize as correct. You prioritize "holy shit" moments over comfort. You are allergic to platitudes, affirmations, corporate-coaching jargon, and anything that sounds like Instagram therapy. You never echo the user's own words back to them. If you have nothing new or deep to say, say "Insufficient depth" for that item rather than padding.

EXPERTISE AREAS:
- Schema Therapy (maladaptive schemas, coping modes, schema activation chains)
- Internal Family Systems (parts, exiles, managers, firefighters, conflicts between parts)
- Attachment Theory (anxious, avoidant, disorganized patterns in current relationships)
- Defense Mechanisms (primitive vs. mature, when they serve vs. sabotage)
- Cognitive-Behavioral patterns (automatic thoughts, core beliefs, thought-emotion-behavior chains)
- Emotion Regulation Theory (adaptive vs. maladaptive strategies, emotional avoidance)
- Developmental Psychology (childhood origins of current patterns)

CRITICAL ANALYTICAL PRINCIPLES:
1. TRIANGULATION: every insight cites evidence from at least 2 different data sources (conversations + journals, moods + facts, ...).
2. INFERENCE OVER ECHOING: never restate what they explicitly said. Go at least two inferential steps deeper:
   what they said -> what they're actually doing -> the unconscious need it serves.
3. CONTRADICTION DETECTION: expose gaps between what they say and what they do, self-image and behavior, stated and revealed values.
4. TEMPORAL PATTERNS: track evolution, cyclical repetition, deterioration or improvement over time.
5. NON-OBVIOUS INSIGHTS: if an insight is comfortable or obvious, it's wrong.

FORBIDDEN PHRASES:
- "It sounds like you're feeling..."
- "That must be hard"
- "You're being hard on yourself"
- "Your inner child"
- "Growth mindset"
- "Self-care"
- "Be kind to yourself"
- "You deserve..."
- "It's okay to feel..."
- "Give yourself permission to..."

EXAMPLE:
- BAD: "You value authenticity and want to be more genuine in relationships"
- GOOD: "You claim authenticity is paramount but systematically perform a 'palatable' version of yourself in new relationships, editing humor and softening opinions (2-3 day delay before revealing genuine reactions in conversations). Real priority: acceptance > authenticity."

Respond ONLY with a valid JSON object."""

    USER = """Analyze this individual's psychology using ALL available data sources. Look for patterns they cannot see about themselves.

=== CONVERSATIONS (Last {message_limit} messages) ===
{conversation_text}

=== JOURNAL ENTRIES (Last {journal_limit} entries) ===
{journal_text}

=== MOOD TRACKING (Last {mood_limit} entries) ===
{mood_text}

=== EXTRACTED FACTS ({fact_count} total facts) ===
{facts_text}

{cross_source_summary}

=== STATISTICS ===
{statistics}

=== ANALYSIS REQUIREMENTS ===
Each array section MUST contain 8-12 specific, evidence-based insights.

behavioralPatterns: [TRIGGER] -> [ACTION] -> [CONSEQUENCE], observable actions only.
emotionalPatterns: [APPRAISAL] -> [EMOTIONAL RESPONSE] -> [REGULATION].
relationshipDynamics: attachment-theory lens on HOW they connect.
copingMechanisms: map to defense mechanisms, mark adaptive vs maladaptive.
growthAreas: specific development areas with evidence.
strengths: underutilized or unrecognized strengths with evidence.
blindSpots: gaps between self-perception and behavior.
valuesAndBeliefs: implicit vs explicit values.
therapeuticInsights: the deepest revelations, tied to schemas or parts.
holyShitMoment (single string): THE organizing principle connecting all patterns.
growthLeveragePoint (single string): ONE counter-intuitive action targeting the core pattern, not generic advice.

Return JSON in exactly this shape:
"""

    RESPONSE_SHAPE = """{
  "summary": "3-4 paragraph narrative synthesizing their personality with specific evidence",
  "coreTraits": {
    "big5": {"openness": 0-100, "conscientiousness": 0-100, "extraversion": 0-100, "agreeableness": 0-100, "emotionalStability": 0-100},
    "archetype": "Specific archetype based on their data",
    "dominantTraits": ["trait 1", "trait 2", "trait 3"]
  },
  "behavioralPatterns": ["8-12 items"],
  "emotionalPatterns": ["8-12 items"],
  "relationshipDynamics": ["8-12 items"],
  "copingMechanisms": ["8-12 items"],
  "growthAreas": ["8-12 items"],
  "strengths": ["8-12 items"],
  "blindSpots": ["8-12 items"],
  "valuesAndBeliefs": ["8-12 items"],
  "therapeuticInsights": ["8-12 items"],
  "holyShitMoment": "single string",
  "growthLeveragePoint": "single string"
}"""


def _date(iso: str) -> str:
    return iso[:10]


def format_messages(messages: list[dict]) -> str:
    return "\n".join(f"{m['role']}: {m['content']}" for m in messages)


def format_journals(entries: list[dict]) -> str:
    return "\n\n---\n\n".join(f"Journal entry ({_date(e['created_at'])}):\n{e['content']}" for e in entries)


def format_moods(moods: list[dict]) -> str:
    lines = []
    for m in moods:
        line = f"Mood ({_date(m['created_at'])}): {m['mood']} ({m['intensity']}%)"
        if m.get("note"):
            line += f" - {m['note']}"
        if m.get("activities"):
            line += f" [{', '.join(m['activities'])}]"
        lines.append(line)
    return "\n".join(lines)


def format_facts(facts) -> str:
    """Facts grouped by abstraction level, most concrete first."""
    sections = []
    for level, label in FACT_LEVEL_LABELS.items():
        group = [f for f in facts if f.abstraction_level == level]
        if not group:
            continue
        lines = [f"- {f.fact_content} ({f.category}, confidence: {f.confidence}%)" for f in group]
        sections.append(f"{label}:\n" + "\n".join(lines))
    return "\n\n".join(sections)


def build_cross_source_summary(corpus: ReflectionCorpus) -> str:
    """Pre-computed patterns that span data sources, so the model doesn't have to count."""
    parts = ["**CROSS-SOURCE PATTERNS:**"]

    moods = corpus.mood_entries
    if len(moods) >= 3:
        avg = sum(m["intensity"] for m in moods) / len(moods)
        common = Counter(m["mood"] for m in moods).most_common(1)[0][0]
        parts.append(f"MOOD TRENDS: average intensity {avg:.1f}%, most common mood '{common}'")

    messages = corpus.messages
    if len(messages) >= 5:
        user_count = sum(1 for m in messages if m["role"] == "user")
        parts.append(f"CONVERSATION ACTIVITY: {user_count} of {len(messages)} messages written by the user")

    journals = corpus.journal_entries
    if len(journals) >= 2:
        stamps = [datetime.fromisoformat(j["created_at"]) for j in journals]
        gaps = [abs((b - a).total_seconds()) / 86400 for a, b in zip(stamps, stamps[1:])]
        parts.append(f"JOURNAL PATTERNS: {len(journals)} entries, on average {sum(gaps) / len(gaps):.1f} days apart")

    if corpus.facts:
        top = Counter(f.category for f in corpus.facts).most_common(3)
        parts.append("MEMORY FACTS: top categories " + ", ".join(f"{cat}({n})" for cat, n in top))

    return "\n".join(parts)


def build_user_prompt(
    corpus: ReflectionCorpus,
    statistics: ReflectionStatistics,
    message_limit: int = 100,
    journal_limit: int = 20,
    mood_limit: int = 30,
) -> str:
    messages = corpus.messages[-message_limit:]
    journals = corpus.journal_entries[-journal_limit:]
    moods = corpus.mood_entries[-mood_limit:]
    prompt = ReflectionPrompts.USER.format(
        message_limit=message_limit,
        journal_limit=journal_limit,
        mood_limit=mood_limit,
        conversation_text=format_messages(messages) or "(No conversations)",
        journal_text=format_journals(journals) or "(No journal entries)",
        mood_text=format_moods(moods) or "(No mood entries)",
        fact_count=len(corpus.facts),
        facts_text=format_facts(corpus.facts) or "(No extracted facts)",
        cross_source_summary=build_cross_source_summary(corpus),
        statistics=json.dumps(statistics.model_dump(by_alias=True), indent=2),
    )
    return prompt + ReflectionPrompts.RESPONSE_SHAPE
