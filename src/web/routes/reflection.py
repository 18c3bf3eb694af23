"""Personality reflection routes: start a background synthesis, then poll it."""

import structlog
from fastapi import APIRouter, Depends

from cli.config_models import AppConfig
from errors import BadRequestError, ForbiddenError, NotFoundError
from llm import LLMProvider
from reflection import PersonalityReflection, start_reflection, visible_sections
from reflection import store as reflection_store
from shared_types import ReflectionTier
from web.auth import get_current_user
from web.deps import get_config, get_llm_provider
from web.models import ReflectionRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api/personality-reflection", tags=["reflection"])

NO_REFLECTION_MESSAGE = "No personality reflection found. Generate one first."


def _to_response(reflection: PersonalityReflection) -> dict:
    data = reflection.model_dump(by_alias=True, mode="json")
    data["visibleSections"] = visible_sections(reflection.tier)
    return data


@router.post("")
async def create_reflection(
    body: ReflectionRequest | None = None,
    user: dict = Depends(get_current_user),
    provider: LLMProvider | None = Depends(get_llm_provider),
    config: AppConfig = Depends(get_config),
):
    """Queue a reflection, or return the one already in flight."""
    tier = (body or ReflectionRequest()).tier
    if tier is None:
        tier = ReflectionTier.FREE.value
    if tier not in {t.value for t in ReflectionTier}:
        raise BadRequestError("Invalid tier. Must be 'free', 'standard', or 'premium'")

    reflection = start_reflection(user["id"], tier, provider, config=config.reflection)
    return _to_response(reflection)


@router.get("")
async def get_latest_completed(user: dict = Depends(get_current_user)):
    reflection = reflection_store.get_latest_completed(user["id"])
    if reflection is None:
        raise NotFoundError(NO_REFLECTION_MESSAGE)
    return _to_response(reflection)


@router.get("/latest")
async def get_latest(user: dict = Depends(get_current_user)):
    """The in-flight reflection if there is one, otherwise the latest completed."""
    reflection = reflection_store.get_active_reflection(user["id"]) or reflection_store.get_latest_completed(
        user["id"]
    )
    if reflection is None:
        raise NotFoundError(NO_REFLECTION_MESSAGE)
    return _to_response(reflection)


@router.get("/{reflection_id}")
async def get_reflection(reflection_id: str, user: dict = Depends(get_current_user)):
    reflection = reflection_store.get_reflection(reflection_id)
    if reflection is None:
        raise NotFoundError("Personality reflection not found.")
    if reflection.user_id != user["id"]:
        raise ForbiddenError("Access denied.")
    return _to_response(reflection)
