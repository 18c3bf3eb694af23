"""Category scoring: recent content + category rubric -> LLM -> validated score."""

import asyncio
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import structlog
from pydantic import ValidationError

from cli.config_models import ScoringConfig
from errors import AIServiceError, BadRequestError, ConflictError, NotFoundError
from llm import LLMError, LLMProvider, LLMResponseParseError, parse_json_object
from shared_types import ConfidenceLevel, PeriodType

from . import store
from .aggregator import RecentContent, aggregate_recent_content
from .categories import get_category
from .models import CategoryScoreResult, PersistedScoreResult
from .prompts import build_system_prompt, build_user_prompt

logger = structlog.get_logger()

INSUFFICIENT_DATA_REASONING = (
    "Insufficient data to generate a reliable score. "
    "Continue journaling and chatting to build your profile."
)
LOW_CONFIDENCE_REASONING = (
    "We're starting to see some patterns, but need more data for a definitive assessment. "
    "Keep sharing your thoughts to sharpen this insight."
)
DUPLICATE_PERIOD_MESSAGE = "Score already exists for this period. Retrieve existing score instead."


def insufficient_data_result() -> CategoryScoreResult:
    return CategoryScoreResult(
        score=0,
        reasoning=INSUFFICIENT_DATA_REASONING,
        confidence_level=ConfidenceLevel.LOW,
    )


def period_bounds(period_type: PeriodType | str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """UTC period containing ``now``: the day, or the Monday-based week."""
    period_type = PeriodType(period_type)
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period_type == PeriodType.WEEKLY:
        start -= timedelta(days=start.weekday())
        return start, start + timedelta(days=7)
    return start, start + timedelta(days=1)


class ScoringEngine:
    """Scores one (user, category) pair against the category rubric."""

    def __init__(
        self,
        llm: LLMProvider | None,
        config: ScoringConfig | None = None,
        temperature: float | None = 0.7,
        db_path: Path | None = None,
    ):
        self.llm = llm
        self.config = config or ScoringConfig()
        self.temperature = temperature
        self.db_path = db_path

    def score(
        self, user_id: str, category_id: str, lookback_days: int | None = None, now: datetime | None = None
    ) -> CategoryScoreResult:
        """Score without persisting.

        Returns the insufficient-data sentinel (score 0, confidence low)
        without calling the LLM when the lookback window is too thin.

        Raises:
            NotFoundError: unknown category id.
            AIServiceError: LLM failure or unusable reply.
        """
        result, _ = self._score(user_id, category_id, lookback_days, now)
        return result

    def _score(
        self, user_id: str, category_id: str, lookback_days: int | None, now: datetime | None
    ) -> tuple[CategoryScoreResult, RecentContent]:
        category = get_category(category_id)
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")

        lookback_days = lookback_days or self.config.default_lookback_days
        content = aggregate_recent_content(
            user_id, lookback_days, config=self.config, now=now, db_path=self.db_path
        )
        if not content.has_minimum_data:
            logger.info(
                "scoring.insufficient_data",
                user_id=user_id,
                category_id=category_id,
                journals=len(content.journal_entries),
                user_messages=content.user_message_count,
            )
            return insufficient_data_result(), content

        if self.llm is None:
            raise AIServiceError("No LLM provider configured")

        try:
            response = self.llm.generate(
                messages=[{"role": "user", "content": build_user_prompt(category, content)}],
                system=build_system_prompt(category),
                max_tokens=self.config.max_tokens,
                json_mode=True,
                temperature=self.temperature,
            )
        except LLMError as e:
            logger.error("scoring.llm_failed", user_id=user_id, category_id=category_id, error=str(e))
            raise AIServiceError(f"Failed to generate category score: {e}") from e

        try:
            result = CategoryScoreResult.model_validate(parse_json_object(response))
        except (LLMResponseParseError, ValidationError) as e:
            logger.error("scoring.invalid_response", user_id=user_id, category_id=category_id, error=str(e))
            raise AIServiceError(f"Failed to generate category score: {e}") from e

        if result.confidence_level == ConfidenceLevel.LOW:
            result.reasoning = LOW_CONFIDENCE_REASONING

        logger.info(
            "scoring.scored",
            user_id=user_id,
            category_id=category_id,
            score=result.score,
            confidence=result.confidence_level.value,
        )
        return result, content

    def score_and_persist(
        self,
        user_id: str,
        category_id: str,
        period_type: PeriodType | str = PeriodType.DAILY,
        lookback_days: int | None = None,
        now: datetime | None = None,
    ) -> PersistedScoreResult:
        """Score and write exactly one row for the current period.

        Raises:
            NotFoundError: unknown category id.
            ConflictError: the period already has a score; fetch it instead of retrying.
            BadRequestError: not enough recent content to score.
            AIServiceError: LLM failure or unusable reply.
        """
        period_type = PeriodType(period_type)
        if get_category(category_id) is None:
            raise NotFoundError(f"Category not found: {category_id}")

        period_start, period_end = period_bounds(period_type, now)
        if store.get_score_for_period(user_id, category_id, period_type, period_start, db_path=self.db_path):
            raise ConflictError(DUPLICATE_PERIOD_MESSAGE)

        result, content = self._score(user_id, category_id, lookback_days, now)
        if not content.has_minimum_data:
            raise BadRequestError(result.reasoning)

        previous = store.get_previous_score(
            user_id, category_id, period_type, period_start, db_path=self.db_path
        )
        delta = result.score - previous.score if previous else None

        try:
            row = store.insert_score(
                user_id,
                category_id,
                period_type.value,
                period_start,
                period_end,
                result,
                delta=delta,
                contributors=content.contributors(),
                db_path=self.db_path,
            )
        except sqlite3.IntegrityError as e:
            # lost a race with a concurrent writer for the same period
            raise ConflictError(DUPLICATE_PERIOD_MESSAGE) from e

        logger.info(
            "scoring.persisted",
            user_id=user_id,
            category_id=category_id,
            period_type=period_type.value,
            score_id=row.id,
            delta=delta,
        )
        return PersistedScoreResult(**result.model_dump(), score_id=row.id)


async def score_selected_categories(user_id: str, engine: ScoringEngine) -> dict[str, str]:
    """Daily-score every selected category, one at a time, in selection order.

    Runs as a background job after a journal entry is saved. Categories that
    are already scored for today or lack data are skipped; an AI failure
    aborts the remaining categories.
    """
    selections = await asyncio.to_thread(store.list_user_categories, user_id, engine.db_path)
    outcomes: dict[str, str] = {}
    for selection in selections:
        category_id = selection["category_id"]
        try:
            await asyncio.to_thread(
                engine.score_and_persist, user_id, category_id, PeriodType.DAILY, 7
            )
            outcomes[category_id] = "scored"
        except ConflictError:
            outcomes[category_id] = "exists"
        except (BadRequestError, NotFoundError) as e:
            logger.info("scoring.category_skipped", user_id=user_id, category_id=category_id, reason=str(e))
            outcomes[category_id] = "skipped"
    logger.info("scoring.batch_complete", user_id=user_id, outcomes=outcomes)
    return outcomes
