"""Memory facts: confidence-scored statements about a user, consumed as LLM context."""

from .models import AbstractionLevel, MemoryFact
from .store import FactStore

__all__ = [
    "AbstractionLevel",
    "MemoryFact",
    "FactStore",
]
