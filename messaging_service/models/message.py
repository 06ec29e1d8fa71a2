"""
Direct message between two users.
"""
from sqlalchemy import Column, Integer, Text, ForeignKey, Index

from .base import BaseModel


class Message(BaseModel):
    """A text message. ``sender`` and ``receiver`` are plain user id columns."""

    __tablename__ = "messages"

    body = Column(Text, nullable=False)
    sender = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        Index("idx_messages_sender_receiver", "sender", "receiver"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, sender={self.sender}, receiver={self.receiver})>"
