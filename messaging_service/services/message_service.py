"""
Message service: send, list, edit and delete direct messages.

Only the sender of a message may change or delete it. The receiver has
no extra rights and there is no administrative override.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..interfaces.repository_interface import IMessageRepository, IUserRepository
from ..models.message import Message
from ..repositories.message_repository import MessageRepository
from ..repositories.user_repository import UserRepository
from ..schemas.message_schemas import ConversationEntry, MessageCreate, MessageUpdate
from ..schemas.validation import validate_payload
from .token_service import TokenService

logger = structlog.get_logger()

UNKNOWN_SENDER = "Unknown user"


class MessageService:
    """Message operations with sender-ownership checks."""

    def __init__(
        self,
        token_service: TokenService,
        message_repository: Optional[IMessageRepository] = None,
        user_repository: Optional[IUserRepository] = None
    ):
        self.token_service = token_service
        self.message_repository = message_repository or MessageRepository()
        self.user_repository = user_repository or UserRepository()

    async def list_conversation(self, db: AsyncSession, token: Optional[str], contact_id: int) -> List[Message]:
        """All messages between the caller and ``contact_id``, oldest first."""
        user_id = await self.token_service.verify(token)
        return await self.message_repository.list_between(db, user_id, contact_id)

    async def group_by_sender(self, db: AsyncSession, messages: List[Message]) -> Dict[str, List[Dict[str, Any]]]:
        """
        Label an ordered conversation by sender display name.

        Order within each group follows the input order. Two senders that
        share a display name end up in the same group.
        """
        senders = await self.user_repository.get_many(db, {m.sender for m in messages})
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for message in messages:
            sender = senders.get(message.sender)
            name = sender.name if sender else UNKNOWN_SENDER
            entry = ConversationEntry.model_validate(message).model_dump(mode="json")
            grouped.setdefault(name, []).append(entry)
        return grouped

    async def send(self, db: AsyncSession, token: Optional[str], payload: Any) -> Message:
        """
        Send a message from the caller to ``payload["receiver"]``.

        Raises:
            AuthenticationError: Invalid token
            ValidationError: Empty body, or receiver missing or unknown
        """
        sender_id = await self.token_service.verify(token)
        data = validate_payload(MessageCreate, payload)

        if not await self.user_repository.exists(db, data.receiver):
            raise ValidationError.for_field("receiver", "The selected receiver is invalid.")

        return await self.message_repository.create(
            db, sender=sender_id, receiver=data.receiver, body=data.body
        )

    async def update(self, db: AsyncSession, token: Optional[str], message_id: int, payload: Any) -> Message:
        """
        Replace the body of a message the caller sent.

        Raises:
            AuthenticationError: Invalid token
            NotFoundError: No such message
            AuthorizationError: Caller is not the sender
            ValidationError: Empty body
        """
        message = await self._owned_message(db, token, message_id)
        data = validate_payload(MessageUpdate, payload)
        return await self.message_repository.update_body(db, message, data.body)

    async def delete(self, db: AsyncSession, token: Optional[str], message_id: int) -> None:
        """Delete a message the caller sent. Same checks as update."""
        message = await self._owned_message(db, token, message_id)
        await self.message_repository.delete(db, message)

    async def _owned_message(self, db: AsyncSession, token: Optional[str], message_id: int) -> Message:
        """Load a message and enforce that the token's user is its sender."""
        user_id = await self.token_service.verify(token)

        message = await self.message_repository.get_by_id(db, message_id)
        if not message:
            raise NotFoundError("Message not found")

        if message.sender != user_id:
            logger.warning(
                "Message ownership check failed",
                message_id=message_id,
                user_id=user_id,
                sender=message.sender
            )
            raise AuthorizationError()

        return message
