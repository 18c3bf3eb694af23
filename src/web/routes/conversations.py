"""Conversation history routes. Storage only; chat replies are produced elsewhere."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from web import conversation_store
from web.auth import get_current_user
from web.models import ConversationCreate, ConversationResponse, MessageCreate, MessageResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


def _require_owned(conv_id: str, user_id: str) -> None:
    if not conversation_store.conversation_belongs_to(conv_id, user_id):
        raise HTTPException(status_code=404, detail="Conversation not found")


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(get_current_user),
):
    return conversation_store.list_conversations(user["id"], limit=limit)


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    body: ConversationCreate,
    user: dict = Depends(get_current_user),
):
    return conversation_store.create_conversation(user["id"], title=body.title)


@router.delete("/{conv_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conv_id: str,
    user: dict = Depends(get_current_user),
):
    if not conversation_store.delete_conversation(conv_id, user["id"]):
        raise HTTPException(status_code=404, detail="Conversation not found")


@router.get("/{conv_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conv_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    user: dict = Depends(get_current_user),
):
    _require_owned(conv_id, user["id"])
    return conversation_store.get_messages(conv_id, limit=limit)


@router.post("/{conv_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_message(
    conv_id: str,
    body: MessageCreate,
    user: dict = Depends(get_current_user),
):
    _require_owned(conv_id, user["id"])
    return conversation_store.add_message(conv_id, body.role, body.content)
