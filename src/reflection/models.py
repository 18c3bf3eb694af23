"""Personality reflection payload, statistics snapshot and stored record."""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared_types import ReflectionStatus, ReflectionTier

MAX_SECTION_ITEMS = 12

SECTION_FIELDS = (
    "behavioral_patterns",
    "emotional_patterns",
    "relationship_dynamics",
    "coping_mechanisms",
    "growth_areas",
    "strengths",
    "blind_spots",
    "values_and_beliefs",
    "therapeutic_insights",
)

# Sections each tier unlocks in the UI; synthesis always fills all nine
TIER_SECTIONS: dict[ReflectionTier, tuple[str, ...]] = {
    ReflectionTier.FREE: ("behavioral_patterns", "growth_areas"),
    ReflectionTier.STANDARD: (
        "behavioral_patterns",
        "emotional_patterns",
        "relationship_dynamics",
        "growth_areas",
        "strengths",
        "blind_spots",
    ),
    ReflectionTier.PREMIUM: SECTION_FIELDS,
}

TIER_NAMES = {
    ReflectionTier.FREE: "Starter Insights",
    ReflectionTier.STANDARD: "Deep Dive",
    ReflectionTier.PREMIUM: "Devastating Truth",
}


def visible_sections(tier: ReflectionTier | str) -> list[str]:
    """camelCase names of the sections a tier shows, plus the capstone for premium."""
    tier = ReflectionTier(tier)
    names = [to_camel(s) for s in TIER_SECTIONS[tier]]
    if tier == ReflectionTier.PREMIUM:
        names += ["holyShitMoment", "growthLeveragePoint"]
    return names


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clamp_trait(v):
    if isinstance(v, bool) or v is None:
        return 50 if v is None else v
    if isinstance(v, str):
        v = float(v.strip())
    if isinstance(v, (int, float)):
        if not math.isfinite(v):
            raise ValueError("trait score must be a finite number")
        return max(0, min(100, round(v)))
    return v


class Big5Traits(CamelModel):
    openness: int = 50
    conscientiousness: int = 50
    extraversion: int = 50
    agreeableness: int = 50
    emotional_stability: int = 50

    _clamp = field_validator(
        "openness", "conscientiousness", "extraversion", "agreeableness", "emotional_stability", mode="before"
    )(_clamp_trait)


class CoreTraits(CamelModel):
    big5: Big5Traits = Field(default_factory=Big5Traits)
    archetype: str = ""
    dominant_traits: list[str] = Field(default_factory=list)

    @field_validator("dominant_traits", mode="before")
    @classmethod
    def clean_traits(cls, v):
        if not isinstance(v, list):
            return []
        return [t.strip() for t in v if isinstance(t, str) and t.strip()][:5]


class ReflectionPayload(CamelModel):
    """The content the LLM produces; validated strictly enough to reject garbage."""

    summary: str = Field(..., min_length=1)
    core_traits: CoreTraits
    behavioral_patterns: list[str] = Field(default_factory=list)
    emotional_patterns: list[str] = Field(default_factory=list)
    relationship_dynamics: list[str] = Field(default_factory=list)
    coping_mechanisms: list[str] = Field(default_factory=list)
    growth_areas: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    blind_spots: list[str] = Field(default_factory=list)
    values_and_beliefs: list[str] = Field(default_factory=list)
    therapeutic_insights: list[str] = Field(default_factory=list)
    holy_shit_moment: Optional[str] = None
    growth_leverage_point: Optional[str] = None

    @field_validator(*SECTION_FIELDS, mode="before")
    @classmethod
    def section_is_string_list(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("section must be a list of strings")
        return [item for item in v if isinstance(item, str)]

    @field_validator("summary", "holy_shit_moment", "growth_leverage_point", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v


class ReflectionStatistics(CamelModel):
    total_conversations: int = 0
    total_messages: int = 0
    total_journal_entries: int = 0
    total_mood_entries: int = 0
    total_memory_facts: int = 0
    average_mood_score: float = 0.0
    journal_streak: int = 0
    most_common_emotions: list[str] = Field(default_factory=list)
    most_active_categories: list[str] = Field(default_factory=list)
    engagement_score: int = 0


class ReflectionProfile(ReflectionPayload):
    """Payload plus the statistics computed alongside it."""

    statistics: ReflectionStatistics


class PersonalityReflection(CamelModel):
    """A stored reflection record, including job status."""

    id: str
    user_id: str
    tier: ReflectionTier
    status: ReflectionStatus
    progress: int = 0
    current_section: Optional[str] = None
    error_message: Optional[str] = None
    summary: str = ""
    core_traits: dict = Field(default_factory=dict)
    behavioral_patterns: list[str] = Field(default_factory=list)
    emotional_patterns: list[str] = Field(default_factory=list)
    relationship_dynamics: list[str] = Field(default_factory=list)
    coping_mechanisms: list[str] = Field(default_factory=list)
    growth_areas: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    blind_spots: list[str] = Field(default_factory=list)
    values_and_beliefs: list[str] = Field(default_factory=list)
    therapeutic_insights: list[str] = Field(default_factory=list)
    holy_shit_moment: Optional[str] = None
    growth_leverage_point: Optional[str] = None
    statistics: Optional[dict] = None
    created_at: str
    updated_at: str

    @property
    def is_active(self) -> bool:
        return self.status in (ReflectionStatus.PENDING, ReflectionStatus.PROCESSING)
