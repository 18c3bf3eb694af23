"""Dependency injection for FastAPI routes."""

from functools import lru_cache

import structlog
from fastapi import Depends

from cli.config import load_config_model
from cli.config_models import AppConfig
from llm import LLMError, LLMProvider, create_llm_provider
from scoring import ScoringEngine

logger = structlog.get_logger()


@lru_cache
def get_config() -> AppConfig:
    """Load shared config from the first config.yaml found."""
    return load_config_model()


@lru_cache
def _cached_provider(provider: str, api_key: str | None, model: str | None) -> LLMProvider:
    return create_llm_provider(provider=provider, api_key=api_key, model=model)


def get_llm_provider(config: AppConfig = Depends(get_config)) -> LLMProvider | None:
    """Configured LLM provider, or None when no API key is available.

    Routes that need the model turn None into a 502 through the engines.
    """
    try:
        return _cached_provider(config.llm.provider, config.llm.api_key, config.llm.model)
    except LLMError as e:
        logger.warning("llm.provider_unavailable", error=str(e))
        return None


def get_scoring_engine(
    config: AppConfig = Depends(get_config),
    llm: LLMProvider | None = Depends(get_llm_provider),
) -> ScoringEngine:
    return ScoringEngine(llm, config=config.scoring, temperature=config.llm.temperature)
