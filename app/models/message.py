# app/models/message.py - Direct messages between two users
from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Index, String, Text

from app.models.base import Base, new_id, now_ms


class Message(Base):
    """A directed message; threads are derived, not stored"""
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=new_id)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)

    __table_args__ = (
        Index("ix_messages_receiver_unread", "receiver_id", "read"),
    )

    def __repr__(self):
        return f"<Message(id='{self.id}', sender_id='{self.sender_id}', receiver_id='{self.receiver_id}')>"
