"""Shared enums and types for innertruth."""

from enum import StrEnum


class PeriodType(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"


class ConfidenceLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReflectionTier(StrEnum):
    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"


class ReflectionStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


ACTIVE_REFLECTION_STATUSES = (ReflectionStatus.PENDING, ReflectionStatus.PROCESSING)


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class FactStatus(StrEnum):
    ACTIVE = "active"
    SUPERSEDED = "superseded"


class Trend(StrEnum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"
