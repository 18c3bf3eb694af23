"""Shared test fixtures for InnerTruth."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def db_path(tmp_path):
    """Fresh SQLite file per test; every store without an explicit path uses it."""
    from db import init_db

    path = tmp_path / "innertruth.db"
    with patch("db._DEFAULT_DB_PATH", path):
        init_db()
        yield path


@pytest.fixture
def user_id(db_path):
    from web.user_store import get_or_create_user

    get_or_create_user("user-123", email="test@example.com", name="Test")
    return "user-123"


@pytest.fixture
def now():
    return datetime(2024, 3, 13, 15, 30, tzinfo=timezone.utc)  # a Wednesday


@pytest.fixture
def score_payload():
    return {
        "score": 72,
        "reasoning": "Consistently names feelings before reacting, with one relapse under deadline pressure.",
        "keyPatterns": ["Pauses before responding", "Journals after conflict"],
        "progressIndicators": ["Fewer late-night spirals"],
        "areasForGrowth": ["Asking for help earlier"],
        "confidenceLevel": "high",
        "evidenceSnippets": [{"source": "journal", "excerpt": "I waited before replying", "date": "2024-03-12"}],
        "dynamicNudge": "Next time the inbox spikes, write one sentence about what you need first.",
    }


@pytest.fixture
def reflection_payload():
    sections = {
        "behavioralPatterns": [
            "Deflects praise within seconds, keeping achievements invisible to others",
            "Over-prepares for meetings after any perceived criticism from peers",
        ],
        "emotionalPatterns": ["Reads neutral feedback as rejection and withdraws for days"],
        "relationshipDynamics": ["Texts repeatedly when replies are slow, then goes silent"],
        "copingMechanisms": ["Intellectualizes conflict instead of naming hurt"],
        "growthAreas": ["Tolerating uncertainty without rushing decisions"],
        "strengths": ["Notices relationship shifts early and accurately"],
        "blindSpots": ["Frames approval-seeking as being considerate"],
        "valuesAndBeliefs": ["Acceptance ranks above authenticity in practice"],
        "therapeuticInsights": ["Perfectionism functions as insurance against abandonment"],
    }
    return {
        "summary": "A vigilant achiever who performs ease while bracing for rejection.",
        "coreTraits": {
            "big5": {
                "openness": 78,
                "conscientiousness": 85,
                "extraversion": 40,
                "agreeableness": 70,
                "emotionalStability": 35,
            },
            "archetype": "The Guarded Achiever",
            "dominantTraits": ["vigilant", "driven", "self-critical"],
        },
        **sections,
        "holyShitMoment": "You audition for love you already have.",
        "growthLeveragePoint": "Disappoint someone on purpose this week and watch nothing collapse.",
    }


@pytest.fixture
def mock_llm():
    """LLMProvider stand-in; set ``.generate.return_value`` to the canned reply."""
    llm = MagicMock()
    llm.generate.return_value = "{}"
    return llm
