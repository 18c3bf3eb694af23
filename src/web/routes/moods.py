"""Mood check-in routes."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from journal.moods import MoodStore
from web.auth import get_current_user
from web.models import MoodCreate, MoodEntry

router = APIRouter(prefix="/api/mood-entries", tags=["moods"])


@router.get("", response_model=list[MoodEntry])
async def list_moods(
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(get_current_user),
):
    return MoodStore(user["id"]).list_entries(limit=limit)


@router.post("", response_model=MoodEntry, status_code=status.HTTP_201_CREATED)
async def create_mood(
    body: MoodCreate,
    user: dict = Depends(get_current_user),
):
    try:
        return MoodStore(user["id"]).add(
            body.mood, body.intensity, note=body.note, activities=body.activities
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
