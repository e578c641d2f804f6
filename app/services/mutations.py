# app/services/mutations.py - Pre-validated write requests handed to the persistence layer
"""
The core never writes. It checks that a mutation is allowed for the caller
and hands back a request describing the write; the persistence layer
applies it and a fresh snapshot is loaded afterwards.
"""
import logging
from typing import Optional, Tuple

from pydantic import BaseModel

from app.services.permissions import Capability, has_permission
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


class MarkNotificationRead(BaseModel):
    notification_id: str
    user_id: str

    class Config:
        frozen = True


class SendMessage(BaseModel):
    sender_id: str
    receiver_id: str
    content: str
    created_at: int

    class Config:
        frozen = True


class MarkConversationRead(BaseModel):
    reader_id: str
    partner_id: str
    message_ids: Tuple[str, ...]

    class Config:
        frozen = True


def prepare_mark_notification_read(queries: ScopedQueries, notification_id: str) -> Optional[MarkNotificationRead]:
    """None when the notification is missing or not the caller's"""
    notification = queries.get_notification(notification_id)
    if notification is None:
        return None
    return MarkNotificationRead(notification_id=notification.id, user_id=notification.user_id)


def prepare_send_message(
    queries: ScopedQueries,
    receiver_id: str,
    content: str,
    now: int,
) -> Optional[SendMessage]:
    """None unless the caller may send and may see the receiver"""
    session = queries.session
    if queries.user_id is None or not has_permission(session.role, Capability.SEND_MESSAGES):
        return None
    content = (content or "").strip()
    if not content or len(content) > MAX_MESSAGE_LENGTH:
        logger.info(f"Rejected message from {session.user_id}: content length {len(content)}")
        return None
    if not queries.can_message(receiver_id):
        return None
    return SendMessage(sender_id=session.user_id, receiver_id=receiver_id, content=content, created_at=now)


def prepare_mark_conversation_read(queries: ScopedQueries, partner_id: str) -> Optional[MarkConversationRead]:
    """Unread messages the caller received from ``partner_id``; None if there are none"""
    if queries.user_id is None:
        return None
    unread = tuple(
        m.id for m in queries.conversation_with(partner_id)
        if m.receiver_id == queries.user_id and not m.read
    )
    if not unread:
        return None
    return MarkConversationRead(reader_id=queries.user_id, partner_id=partner_id, message_ids=unread)
