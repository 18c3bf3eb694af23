"""Data models for extracted memory facts."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shared_types import FactStatus


class AbstractionLevel(str, Enum):
    RAW_FACT = "raw_fact"
    INFERRED_BELIEF = "inferred_belief"
    DEFENSE_MECHANISM = "defense_mechanism"
    IFS_PART = "ifs_part"


@dataclass
class MemoryFact:
    id: str
    user_id: str
    fact_content: str
    category: str
    confidence: int = 50  # 0-100
    abstraction_level: AbstractionLevel = AbstractionLevel.RAW_FACT
    status: FactStatus = FactStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fact_content": self.fact_content,
            "category": self.category,
            "confidence": self.confidence,
            "abstraction_level": self.abstraction_level.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
