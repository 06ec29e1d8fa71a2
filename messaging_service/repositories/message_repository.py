"""
Message repository: persistence for direct messages.
"""

from typing import List, Optional
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import structlog

from ..core.exceptions import StorageError
from ..interfaces.repository_interface import IMessageRepository
from ..models.message import Message

logger = structlog.get_logger()


class MessageRepository(IMessageRepository):
    """Repository for message data access operations."""

    async def create(self, db: AsyncSession, sender: int, receiver: int, body: str) -> Message:
        message = Message(sender=sender, receiver=receiver, body=body)
        try:
            db.add(message)
            await db.commit()
            await db.refresh(message)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Message creation failed", sender=sender, receiver=receiver, error=str(e))
            raise StorageError("Failed to save message") from e

        logger.info("Message created", message_id=message.id, sender=sender, receiver=receiver)
        return message

    async def get_by_id(self, db: AsyncSession, message_id: int) -> Optional[Message]:
        try:
            result = await db.execute(select(Message).where(Message.id == message_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to get message", message_id=message_id, error=str(e))
            raise StorageError("Failed to load message") from e

    async def list_between(self, db: AsyncSession, user_id: int, contact_id: int) -> List[Message]:
        query = (
            select(Message)
            .where(
                or_(
                    and_(Message.sender == user_id, Message.receiver == contact_id),
                    and_(Message.sender == contact_id, Message.receiver == user_id),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to list conversation", user_id=user_id, contact_id=contact_id, error=str(e))
            raise StorageError("Failed to load messages") from e

    async def update_body(self, db: AsyncSession, message: Message, body: str) -> Message:
        try:
            message.body = body
            await db.commit()
            await db.refresh(message)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Message update failed", message_id=message.id, error=str(e))
            raise StorageError("Failed to update message") from e

        logger.info("Message updated", message_id=message.id)
        return message

    async def delete(self, db: AsyncSession, message: Message) -> None:
        message_id = message.id
        try:
            await db.delete(message)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Message deletion failed", message_id=message_id, error=str(e))
            raise StorageError("Failed to delete message") from e

        logger.info("Message deleted", message_id=message_id)
