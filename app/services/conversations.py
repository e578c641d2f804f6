# app/services/conversations.py - Per-partner threads derived from the flat message log
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.schemas.entities import Message, User


class ConversationSummary(BaseModel):
    """One thread between the caller and a partner. Derived, never stored."""

    partner_id: str
    partner: Optional[User] = None
    last_message: Message
    unread_count: int = 0
    message_count: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


def partner_of(message: Message, user_id: str) -> Optional[str]:
    """The other party of a message, or None if the user is not in it"""
    if message.sender_id == user_id:
        return message.receiver_id
    if message.receiver_id == user_id:
        return message.sender_id
    return None


def _recency_key(message: Message):
    # Equal timestamps resolve to the highest id
    return (message.created_at, message.id)


def aggregate_conversations(
    user_id: str,
    messages: Iterable[Message],
    resolve_user: Optional[Callable[[str], Optional[User]]] = None,
) -> List[ConversationSummary]:
    """
    Reduce a message set to one summary per partner, most recent first.

    Messages the user is not part of are ignored. Unread counts only
    include messages received by the user.
    """
    buckets: Dict[str, List[Message]] = {}
    for message in messages:
        partner_id = partner_of(message, user_id)
        if partner_id is None:
            continue
        buckets.setdefault(partner_id, []).append(message)

    summaries = []
    for partner_id, bucket in buckets.items():
        unread = sum(1 for m in bucket if m.receiver_id == user_id and not m.read)
        summaries.append(
            ConversationSummary(
                partner_id=partner_id,
                partner=resolve_user(partner_id) if resolve_user else None,
                last_message=max(bucket, key=_recency_key),
                unread_count=unread,
                message_count=len(bucket),
            )
        )

    summaries.sort(key=lambda s: s.partner_id)
    summaries.sort(key=lambda s: s.last_message.created_at, reverse=True)
    return summaries


def thread_between(user_id: str, partner_id: str, messages: Iterable[Message]) -> List[Message]:
    """All messages exchanged by two users, oldest first"""
    thread = [m for m in messages if partner_of(m, user_id) == partner_id]
    thread.sort(key=_recency_key)
    return thread
