"""Memory routes: read-only view of active facts."""

import structlog
from fastapi import APIRouter, Depends, Query

from memory.store import FactStore
from web.auth import get_current_user
from web.models import MemoryFactResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/memory", tags=["memory"])


@router.get("/facts", response_model=list[MemoryFactResponse])
async def list_facts(
    category: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(get_current_user),
):
    """List active facts, highest confidence first, optionally filtered by category."""
    facts = FactStore(user["id"]).get_active(category=category, limit=limit)
    return [MemoryFactResponse(**f.to_dict()) for f in facts]
