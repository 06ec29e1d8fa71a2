"""
Repository interfaces for dependency abstraction.
Defines contracts for the user and message stores so services can be
exercised against any implementation.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User
from ..models.message import Message


@runtime_checkable
class IUserRepository(Protocol):
    """Protocol for user store operations."""

    async def create(self, db: AsyncSession, user_data: Dict[str, Any]) -> User:
        """
        Persist a new user.

        Args:
            db: Database session
            user_data: Column values; ``password_hash`` must already be hashed

        Returns:
            Created user instance

        Raises:
            ConflictError: If the email is already taken
            StorageError: On any other persistence failure
        """
        ...

    async def get_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        """Get user by ID, or None."""
        ...

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """Get user by (normalized) email, or None."""
        ...

    async def get_many(self, db: AsyncSession, user_ids: Iterable[int]) -> Dict[int, User]:
        """Map each existing id in ``user_ids`` to its user."""
        ...

    async def exists(self, db: AsyncSession, user_id: int) -> bool:
        ...

    async def email_taken(
        self,
        db: AsyncSession,
        email: str,
        exclude_user_id: Optional[int] = None
    ) -> bool:
        """
        Check if another user already holds ``email``.

        Args:
            db: Database session
            email: Email to check
            exclude_user_id: Row to ignore (the caller's own, on update)
        """
        ...

    async def update(self, db: AsyncSession, user: User, update_data: Dict[str, Any]) -> User:
        """Apply ``update_data`` to ``user`` and persist it."""
        ...


@runtime_checkable
class IMessageRepository(Protocol):
    """Protocol for message store operations."""

    async def create(self, db: AsyncSession, sender: int, receiver: int, body: str) -> Message:
        ...

    async def get_by_id(self, db: AsyncSession, message_id: int) -> Optional[Message]:
        ...

    async def list_between(self, db: AsyncSession, user_id: int, contact_id: int) -> List[Message]:
        """
        Messages exchanged between two users in either direction, oldest
        first; ties are broken by id.
        """
        ...

    async def update_body(self, db: AsyncSession, message: Message, body: str) -> Message:
        ...

    async def delete(self, db: AsyncSession, message: Message) -> None:
        ...
