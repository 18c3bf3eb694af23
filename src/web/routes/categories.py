"""Category catalogue and per-user category selection."""

import structlog
from fastapi import APIRouter, Depends, status

from errors import NotFoundError
from scoring import store as score_store
from scoring.categories import get_all_categories, get_category
from shared_types import PeriodType
from web.auth import get_current_user
from web.models import CategoryResponse, UserCategoryCreate, UserCategoryResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["categories"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories():
    return [c.to_dict() for c in get_all_categories()]


def _enrich(user_id: str, selection: dict) -> dict:
    category = get_category(selection["category_id"])
    daily = score_store.get_latest_score(user_id, selection["category_id"], PeriodType.DAILY.value)
    weekly = score_store.get_latest_score(user_id, selection["category_id"], PeriodType.WEEKLY.value)
    return {
        **selection,
        "name": category.name if category else selection["category_id"],
        "slug": category.slug if category else "",
        "latest_daily_score": daily.score if daily else None,
        "latest_weekly_score": weekly.score if weekly else None,
    }


@router.get("/user-categories", response_model=list[UserCategoryResponse])
async def list_user_categories(user: dict = Depends(get_current_user)):
    """Selected categories in selection order, with their latest scores."""
    return [_enrich(user["id"], s) for s in score_store.list_user_categories(user["id"])]


@router.post("/user-categories", response_model=UserCategoryResponse, status_code=status.HTTP_201_CREATED)
async def select_category(
    body: UserCategoryCreate,
    user: dict = Depends(get_current_user),
):
    if get_category(body.category_id) is None:
        raise NotFoundError(f"Category not found: {body.category_id}")
    selection = score_store.select_category(
        user["id"], body.category_id, goal_score=body.goal_score, baseline_score=body.baseline_score
    )
    return _enrich(user["id"], selection)


@router.delete("/user-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_category(
    category_id: str,
    user: dict = Depends(get_current_user),
):
    if not score_store.remove_category(user["id"], category_id):
        raise NotFoundError("Category is not selected.")
    logger.info("scoring.category_removed", user_id=user["id"], category_id=category_id)
