# app/api/routers/messages.py - Messaging routes
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from app.core.db import get_db
from app.api.deps.auth import require_capability
from app.api.deps.snapshot import get_queries
from app.models.base import now_ms
from app.schemas.entities import Message
from app.schemas.message import ConversationReadOut, MessageCreate
from app.schemas.session import UserSession
from app.services.conversations import ConversationSummary
from app.services.mutations import prepare_mark_conversation_read, prepare_send_message
from app.services.permissions import Capability
from app.services.persistence import apply_mark_conversation_read, apply_send_message
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(queries: ScopedQueries = Depends(get_queries)):
    """One entry per partner, most recent conversation first"""
    return queries.conversations()


@router.get("/conversations/{partner_id}", response_model=List[Message])
async def get_conversation(partner_id: str, queries: ScopedQueries = Depends(get_queries)):
    return queries.conversation_with(partner_id)


@router.post("/conversations/{partner_id}/read", response_model=ConversationReadOut)
async def mark_conversation_read(
    partner_id: str,
    queries: ScopedQueries = Depends(get_queries),
    db: Session = Depends(get_db),
):
    request = prepare_mark_conversation_read(queries, partner_id)
    marked = apply_mark_conversation_read(db, request) if request else 0
    if marked:
        logger.info(f"{marked} message(s) from {partner_id} marked read by {queries.user_id}")
    return ConversationReadOut(partner_id=partner_id, marked=marked)


@router.get("/users/{user_id}", response_model=List[Message])
async def list_user_messages(user_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_messages_for_user(user_id))


@router.post("/", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    session: UserSession = Depends(require_capability(Capability.SEND_MESSAGES)),
    queries: ScopedQueries = Depends(get_queries),
    db: Session = Depends(get_db),
):
    request = prepare_send_message(queries, message_data.receiver_id, message_data.content, now_ms())
    if request is None:
        logger.info(f"Message from {session.user_id} to {message_data.receiver_id} not accepted")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")
    return apply_send_message(db, request)
