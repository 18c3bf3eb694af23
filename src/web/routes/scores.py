"""Category score generation, history, weekly summary and insights."""

import asyncio
from datetime import datetime, timedelta, timezone

import structlog
from fastapi import APIRouter, Depends, Query

from errors import ForbiddenError, NotFoundError
from scoring import ScoringEngine, calculate_weekly_summary
from scoring import store as score_store
from scoring.categories import get_category
from scoring.models import CategoryScore, PersistedScoreResult
from shared_types import PeriodType
from web.auth import get_current_user
from web.deps import get_scoring_engine
from web.models import CategoryInsight, GenerateScoreRequest, WeeklySummaryResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["scores"])


def _require_category(category_id: str) -> None:
    if get_category(category_id) is None:
        raise NotFoundError(f"Category not found: {category_id}")


@router.post("/category-scores/{category_id}/generate", response_model=PersistedScoreResult)
async def generate_score(
    category_id: str,
    body: GenerateScoreRequest | None = None,
    user: dict = Depends(get_current_user),
    engine: ScoringEngine = Depends(get_scoring_engine),
):
    """Score the current period. Never overwrites: a second call in the same period is a 409."""
    body = body or GenerateScoreRequest()
    _require_category(category_id)
    if not score_store.is_category_selected(user["id"], category_id):
        raise ForbiddenError("Category not selected. Select it before generating scores.")

    return await asyncio.to_thread(
        engine.score_and_persist, user["id"], category_id, body.period_type, body.lookback_days
    )


@router.get("/category-scores/{category_id}", response_model=list[CategoryScore])
async def list_scores(
    category_id: str,
    period: PeriodType | None = None,
    limit: int = Query(default=30, ge=1, le=365),
    user: dict = Depends(get_current_user),
):
    _require_category(category_id)
    return score_store.list_scores(
        user["id"], category_id, period_type=period.value if period else None, limit=limit
    )


@router.get("/category-scores/{category_id}/summary", response_model=WeeklySummaryResponse)
async def weekly_summary(
    category_id: str,
    days: int = Query(default=7, ge=1, le=90),
    user: dict = Depends(get_current_user),
):
    """Roll the last ``days`` of daily scores up into one score and a trend."""
    _require_category(category_id)
    since = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days - 1)
    scores = score_store.list_scores(
        user["id"], category_id, period_type=PeriodType.DAILY.value, limit=days, since=since
    )
    daily = [s.score for s in reversed(scores)]
    summary = calculate_weekly_summary(daily)
    return WeeklySummaryResponse(
        category_id=category_id,
        days=days,
        weekly_score=summary["weeklyScore"],
        trend=summary["trend"],
        delta=summary["delta"],
        score_count=len(daily),
    )


@router.get("/category-insights/{category_id}", response_model=list[CategoryInsight])
async def list_insights(
    category_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    user: dict = Depends(get_current_user),
):
    _require_category(category_id)
    return score_store.list_insights(user["id"], category_id, limit=limit)
