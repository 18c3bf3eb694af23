"""Multi-provider LLM abstraction layer."""

from .base import (
    LLMAuthError,
    LLMError,
    LLMProvider,
    LLMQuotaError,
    LLMRateLimitError,
)
from .factory import create_llm_provider
from .json_utils import LLMResponseParseError, parse_json_object

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "LLMError",
    "LLMRateLimitError",
    "LLMQuotaError",
    "LLMAuthError",
    "LLMResponseParseError",
    "parse_json_object",
]
