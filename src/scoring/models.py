"""Typed score results, validated straight from the LLM's JSON reply."""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared_types import ConfidenceLevel

MAX_KEY_PATTERNS = 3
MAX_PROGRESS_INDICATORS = 3
MAX_AREAS_FOR_GROWTH = 4
MAX_EVIDENCE_SNIPPETS = 5


def _clean_strings(value, limit: int) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("expected a list of strings")
    cleaned = [v.strip() for v in value if isinstance(v, str) and v.strip()]
    return cleaned[:limit]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvidenceSnippet(CamelModel):
    source: str
    excerpt: str
    date: str = ""


class CategoryScoreResult(CamelModel):
    score: int = Field(..., ge=0, le=100)
    reasoning: str = Field(..., min_length=1)
    key_patterns: list[str] = Field(default_factory=list)
    progress_indicators: list[str] = Field(default_factory=list)
    areas_for_growth: list[str] = Field(default_factory=list)
    confidence_level: ConfidenceLevel
    evidence_snippets: list[EvidenceSnippet] = Field(default_factory=list)
    dynamic_nudge: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        # out-of-range values are clamped, fractional ones rounded
        if isinstance(v, bool):
            raise ValueError("score must be a number")
        if isinstance(v, str):
            v = float(v.strip())
        if not isinstance(v, (int, float)):
            raise ValueError("score must be a number")
        if not math.isfinite(v):
            raise ValueError("score must be a finite number")
        return max(0, min(100, round(v)))

    @field_validator("reasoning", mode="before")
    @classmethod
    def strip_reasoning(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("confidence_level", mode="before")
    @classmethod
    def normalize_confidence(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("key_patterns", mode="before")
    @classmethod
    def limit_key_patterns(cls, v):
        return _clean_strings(v, MAX_KEY_PATTERNS)

    @field_validator("progress_indicators", mode="before")
    @classmethod
    def limit_progress_indicators(cls, v):
        return _clean_strings(v, MAX_PROGRESS_INDICATORS)

    @field_validator("areas_for_growth", mode="before")
    @classmethod
    def limit_areas_for_growth(cls, v):
        return _clean_strings(v, MAX_AREAS_FOR_GROWTH)

    @field_validator("evidence_snippets", mode="before")
    @classmethod
    def limit_evidence(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("evidenceSnippets must be a list")
        return [s for s in v if isinstance(s, dict) and s.get("excerpt")][:MAX_EVIDENCE_SNIPPETS]

    @field_validator("dynamic_nudge", mode="before")
    @classmethod
    def blank_nudge_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PersistedScoreResult(CategoryScoreResult):
    score_id: str


class CategoryScore(CamelModel):
    """A stored score row."""

    id: str
    user_id: str
    category_id: str
    period_type: str
    period_start: str
    period_end: str
    score: int
    delta: Optional[int] = None
    reasoning: str
    key_patterns: list[str] = Field(default_factory=list)
    progress_indicators: list[str] = Field(default_factory=list)
    areas_for_growth: list[str] = Field(default_factory=list)
    confidence_level: ConfidenceLevel
    evidence_snippets: list[EvidenceSnippet] = Field(default_factory=list)
    dynamic_nudge: Optional[str] = None
    contributors: dict = Field(default_factory=dict)
    generated_at: str
