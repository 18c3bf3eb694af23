"""Personality reflections: whole-corpus LLM synthesis run as a tracked background job."""

from .jobs import process_personality_reflection, start_reflection
from .models import TIER_SECTIONS, PersonalityReflection, ReflectionProfile, visible_sections
from .statistics import calculate_streak, compute_statistics, jaccard_similarity
from .synthesizer import ReflectionSynthesizer

__all__ = [
    "TIER_SECTIONS",
    "PersonalityReflection",
    "ReflectionProfile",
    "ReflectionSynthesizer",
    "calculate_streak",
    "compute_statistics",
    "jaccard_similarity",
    "process_personality_reflection",
    "start_reflection",
    "visible_sections",
]
