"""Pydantic request/response schemas for the web API.

Responses serialize camelCase; requests accept camelCase or snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared_types import MessageRole, PeriodType, ReflectionTier


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Personality reflection ---


class ReflectionRequest(ApiModel):
    tier: Optional[str] = ReflectionTier.FREE.value


# --- Category scores ---


class GenerateScoreRequest(ApiModel):
    period_type: PeriodType = PeriodType.DAILY
    lookback_days: int = Field(7, ge=1, le=30)


class WeeklySummaryResponse(ApiModel):
    category_id: str
    days: int
    weekly_score: int
    trend: str
    delta: int
    score_count: int


class CategoryInsight(ApiModel):
    id: str
    category_id: str
    insight_type: str
    title: str
    description: str
    priority: int = 0
    created_at: str


# --- Categories ---


class CategoryResponse(ApiModel):
    id: str
    slug: str
    name: str
    description: str
    tier: int
    is_premium: bool
    sort_order: int
    journal_prompts: list[str] = []
    chat_focus_areas: list[str] = []


class UserCategoryCreate(ApiModel):
    category_id: str
    goal_score: Optional[int] = Field(None, ge=0, le=100)
    baseline_score: Optional[int] = Field(None, ge=0, le=100)


class UserCategoryResponse(ApiModel):
    category_id: str
    name: str
    slug: str
    status: str
    baseline_score: Optional[int] = None
    goal_score: Optional[int] = None
    selected_at: str
    latest_daily_score: Optional[int] = None
    latest_weekly_score: Optional[int] = None


# --- Journal / moods ---


class JournalCreate(ApiModel):
    content: str = Field(..., min_length=1, max_length=100_000)
    prompt: Optional[str] = None


class JournalEntry(ApiModel):
    id: str
    content: str
    prompt: Optional[str] = None
    word_count: int = 0
    created_at: str


class MoodCreate(ApiModel):
    mood: str = Field(..., min_length=1, max_length=50)
    intensity: int = Field(..., ge=0, le=100)
    note: Optional[str] = Field(None, max_length=2000)
    activities: list[str] = []


class MoodEntry(ApiModel):
    id: str
    mood: str
    intensity: int
    note: Optional[str] = None
    activities: list[str] = []
    created_at: str


# --- Conversations ---


class ConversationCreate(ApiModel):
    title: str = ""


class ConversationResponse(ApiModel):
    id: str
    title: str
    created_at: str
    updated_at: str
    message_count: int = 0


class MessageCreate(ApiModel):
    role: MessageRole = MessageRole.USER
    content: str = Field(..., min_length=1, max_length=20_000)


class MessageResponse(ApiModel):
    id: str
    role: str
    content: str
    created_at: str


# --- Memory ---


class MemoryFactResponse(ApiModel):
    id: str
    fact_content: str
    category: str
    confidence: int
    abstraction_level: str
    status: str
    created_at: str
