"""Pydantic configuration models for innertruth."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LLM_PROVIDERS = {"auto", "openai", "claude"}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "auto"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    temperature: float = 0.7

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    db_path: Optional[Path] = None  # None = $INNERTRUTH_HOME/innertruth.db

    @model_validator(mode="after")
    def expand_paths(self):
        if self.db_path is not None:
            self.db_path = self.db_path.expanduser()
        return self


class ScoringConfig(BaseModel):
    """Category scoring: lookback window caps and insufficient-data thresholds."""

    default_lookback_days: int = 7
    journal_limit: int = 10
    conversation_limit: int = 3
    message_limit: int = 20
    min_journal_entries: int = 2
    min_user_messages: int = 5
    max_tokens: int = 1500

    @model_validator(mode="after")
    def validate_limits(self):
        for name in ("default_lookback_days", "journal_limit", "conversation_limit", "message_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"scoring.{name} must be >= 1")
        if not 1 <= self.default_lookback_days <= 30:
            raise ValueError("scoring.default_lookback_days must be between 1 and 30")
        return self


class ReflectionConfig(BaseModel):
    """Personality reflection corpus limits and quality pass."""

    message_limit: int = 100
    journal_limit: int = 20
    mood_limit: int = 30
    min_messages: int = 10
    min_journal_entries: int = 3
    dedup_threshold: float = 0.6
    max_tokens: int = 4000

    @field_validator("dedup_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("dedup_threshold must be in (0, 1]")
        return v


class JobsConfig(BaseModel):
    """Background job lifecycle."""

    shutdown_timeout_seconds: float = 10.0
    stale_reflection_minutes: int = 30
    reap_on_startup: bool = True


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class WebConfig(BaseModel):
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    frontend_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])


class AppConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    reflection: ReflectionConfig = Field(default_factory=ReflectionConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in API keys."""
        if self.llm.api_key:
            key = self.llm.api_key
            if key.startswith("${") and key.endswith("}"):
                env_var = key[2:-1]
                self.llm.api_key = os.getenv(env_var, "") or None
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create config from a parsed YAML dict."""
        if "paths" in data and isinstance(data["paths"].get("db_path"), str):
            data["paths"]["db_path"] = Path(data["paths"]["db_path"])
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
