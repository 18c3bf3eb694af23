"""Personality reflection synthesis: full user corpus -> one LLM pass -> cleaned profile."""

from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from cli.config_models import ReflectionConfig
from errors import AIServiceError
from llm import LLMError, LLMProvider, LLMQuotaError, LLMRateLimitError, LLMResponseParseError, parse_json_object
from shared_types import ReflectionTier

from .models import MAX_SECTION_ITEMS, SECTION_FIELDS, ReflectionPayload, ReflectionProfile
from .prompts import ReflectionPrompts, build_user_prompt
from .statistics import compute_statistics, gather_corpus, has_sufficient_data, jaccard_similarity

logger = structlog.get_logger()

ProgressCallback = Callable[[int, str], None]

LOW_QUALITY_MARKER = "Insufficient depth"


def _keep(item) -> bool:
    return isinstance(item, str) and bool(item.strip()) and LOW_QUALITY_MARKER not in item


def clean_sections(sections: dict[str, list], threshold: float = 0.6) -> dict[str, list[str]]:
    """Drop filler items and near-duplicates.

    Sections are processed in order; an item similar to anything already kept,
    in its own section or an earlier one, is discarded.
    """
    kept_so_far: list[str] = []
    cleaned: dict[str, list[str]] = {}
    for name, items in sections.items():
        section: list[str] = []
        for item in items or []:
            if not _keep(item):
                continue
            item = item.strip()
            if any(jaccard_similarity(item, other) > threshold for other in kept_so_far):
                continue
            section.append(item)
            kept_so_far.append(item)
        cleaned[name] = section[:MAX_SECTION_ITEMS]
    return cleaned


class ReflectionSynthesizer:
    """Builds a full personality profile from everything a user has shared."""

    def __init__(
        self,
        llm: LLMProvider | None,
        config: ReflectionConfig | None = None,
        temperature: float | None = 0.7,
        db_path: Path | None = None,
    ):
        self.llm = llm
        self.config = config or ReflectionConfig()
        self.temperature = temperature
        self.db_path = db_path

    def synthesize(
        self,
        user_id: str,
        tier: ReflectionTier | str = ReflectionTier.FREE,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ReflectionProfile | None:
        """Generate a profile, or None when the user hasn't shared enough yet.

        ``tier`` is recorded in logs only; every tier gets the full analysis.

        Raises:
            AIServiceError: LLM failure or unusable reply.
            LLMRateLimitError: quota or rate limit hit (callers map this to a user message).
        """
        tier = ReflectionTier(tier)

        def report(progress: int, label: str) -> None:
            if on_progress:
                on_progress(progress, label)

        report(10, "Gathering your data...")
        corpus = gather_corpus(user_id, db_path=self.db_path)
        statistics = compute_statistics(corpus)

        if not has_sufficient_data(statistics, self.config.min_messages, self.config.min_journal_entries):
            logger.info(
                "reflection.insufficient_data",
                user_id=user_id,
                messages=statistics.total_messages,
                journals=statistics.total_journal_entries,
            )
            return None

        if self.llm is None:
            raise AIServiceError("No LLM provider configured")

        report(30, "Analyzing patterns across your data...")
        prompt = build_user_prompt(
            corpus,
            statistics,
            message_limit=self.config.message_limit,
            journal_limit=self.config.journal_limit,
            mood_limit=self.config.mood_limit,
        )
        try:
            response = self.llm.generate(
                messages=[{"role": "user", "content": prompt}],
                system=ReflectionPrompts.SYSTEM,
                max_tokens=self.config.max_tokens,
                json_mode=True,
                temperature=self.temperature,
            )
        except (LLMQuotaError, LLMRateLimitError):
            raise
        except LLMError as e:
            logger.error("reflection.llm_failed", user_id=user_id, error=str(e))
            raise AIServiceError(f"Failed to generate personality reflection: {e}") from e

        report(80, "Refining insights...")
        try:
            payload = ReflectionPayload.model_validate(parse_json_object(response))
        except (LLMResponseParseError, ValidationError) as e:
            logger.error("reflection.invalid_response", user_id=user_id, error=str(e))
            raise AIServiceError(f"Failed to generate personality reflection: {e}") from e

        sections = clean_sections(
            {name: getattr(payload, name) for name in SECTION_FIELDS},
            threshold=self.config.dedup_threshold,
        )
        profile = ReflectionProfile(
            **payload.model_dump(exclude=set(SECTION_FIELDS)),
            **sections,
            statistics=statistics,
        )

        logger.info(
            "reflection.synthesized",
            user_id=user_id,
            tier=tier.value,
            items={name: len(items) for name, items in sections.items()},
        )
        report(95, "Finalizing your reflection...")
        return profile
