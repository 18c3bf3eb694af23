"""Journal routes. Saving an entry kicks off background category scoring."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from jobs import job_coordinator
from journal.storage import JournalStorage
from scoring import ScoringEngine, score_selected_categories
from web.auth import get_current_user
from web.deps import get_scoring_engine
from web.models import JournalCreate, JournalEntry

logger = structlog.get_logger()

router = APIRouter(prefix="/api/journal-entries", tags=["journal"])

SCORING_JOB = "category-scoring"


@router.get("", response_model=list[JournalEntry])
async def list_entries(
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(get_current_user),
):
    return JournalStorage(user["id"]).list_entries(limit=limit)


@router.post("", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: JournalCreate,
    user: dict = Depends(get_current_user),
    engine: ScoringEngine = Depends(get_scoring_engine),
):
    try:
        entry = JournalStorage(user["id"]).create(body.content, prompt=body.prompt)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    user_id = user["id"]
    job_coordinator.run(SCORING_JOB, user_id, lambda: score_selected_categories(user_id, engine))
    return entry


@router.get("/{entry_id}", response_model=JournalEntry)
async def get_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
):
    entry = JournalStorage(user["id"]).get(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
):
    if not JournalStorage(user["id"]).delete(entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
