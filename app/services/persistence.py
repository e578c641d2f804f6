# app/services/persistence.py - Apply prepared mutations to the database
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models import Message, Notification
from app.schemas.entities import Message as MessageRecord
from app.services.mutations import MarkConversationRead, MarkNotificationRead, SendMessage

logger = logging.getLogger(__name__)


def apply_mark_notification_read(db: Session, request: MarkNotificationRead) -> bool:
    """Set the read flag; it never goes back to unread. Returns whether a row matched."""
    result = db.execute(
        update(Notification)
        .where(Notification.id == request.notification_id, Notification.user_id == request.user_id)
        .values(read=True)
    )
    db.commit()
    return result.rowcount > 0


def apply_send_message(db: Session, request: SendMessage) -> MessageRecord:
    message = Message(
        sender_id=request.sender_id,
        receiver_id=request.receiver_id,
        content=request.content,
        read=False,
        created_at=request.created_at,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info(f"Message {message.id} sent from {request.sender_id} to {request.receiver_id}")
    return MessageRecord.model_validate(message.to_record())


def apply_mark_conversation_read(db: Session, request: MarkConversationRead) -> int:
    if not request.message_ids:
        return 0
    result = db.execute(
        update(Message)
        .where(
            Message.id.in_(request.message_ids),
            Message.receiver_id == request.reader_id,
            Message.sender_id == request.partner_id,
        )
        .values(read=True)
    )
    db.commit()
    return result.rowcount
