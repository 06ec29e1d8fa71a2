"""
User repository implementation following the Repository pattern.
Handles all user data access operations.
"""

from typing import Any, Dict, Iterable, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import structlog

from ..core.exceptions import ConflictError, StorageError
from ..interfaces.repository_interface import IUserRepository
from ..models.user import User

logger = structlog.get_logger()

UPDATABLE_FIELDS = {"name", "email", "password_hash", "address", "gender", "marital_status"}


class UserRepository(IUserRepository):
    """Repository for user data access operations."""

    async def create(self, db: AsyncSession, user_data: Dict[str, Any]) -> User:
        """
        Create a new user.

        Args:
            db: Database session
            user_data: Column values with an already hashed password

        Returns:
            Created user instance
        """
        user = User(**user_data)
        try:
            db.add(user)
            await db.commit()
            await db.refresh(user)
        except IntegrityError as e:
            await db.rollback()
            logger.warning("User creation hit unique constraint", error=str(e.orig))
            raise ConflictError("email", "The email has already been taken.")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("User creation failed", error=str(e))
            raise StorageError("Failed to create user") from e

        logger.info("User created successfully", user_id=user.id)
        return user

    async def get_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to get user by ID", user_id=user_id, error=str(e))
            raise StorageError("Failed to load user") from e

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.email == email.lower()))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to get user by email", error=str(e))
            raise StorageError("Failed to load user") from e

    async def get_many(self, db: AsyncSession, user_ids: Iterable[int]) -> Dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        try:
            result = await db.execute(select(User).where(User.id.in_(ids)))
            return {user.id: user for user in result.scalars().all()}
        except SQLAlchemyError as e:
            logger.error("Failed to load users", count=len(ids), error=str(e))
            raise StorageError("Failed to load users") from e

    async def exists(self, db: AsyncSession, user_id: int) -> bool:
        try:
            result = await db.execute(select(func.count(User.id)).where(User.id == user_id))
            return result.scalar() > 0
        except SQLAlchemyError as e:
            logger.error("User existence check failed", user_id=user_id, error=str(e))
            raise StorageError("Failed to load user") from e

    async def email_taken(
        self,
        db: AsyncSession,
        email: str,
        exclude_user_id: Optional[int] = None
    ) -> bool:
        query = select(func.count(User.id)).where(User.email == email.lower())
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        try:
            result = await db.execute(query)
            return result.scalar() > 0
        except SQLAlchemyError as e:
            logger.error("Email uniqueness check failed", error=str(e))
            raise StorageError("Failed to check email") from e

    async def update(self, db: AsyncSession, user: User, update_data: Dict[str, Any]) -> User:
        """
        Update user data.

        Args:
            db: Database session
            user: Loaded user to modify
            update_data: Dictionary of fields to update

        Returns:
            Updated user instance
        """
        unknown = set(update_data) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        if not update_data:
            return user

        try:
            for field, value in update_data.items():
                setattr(user, field, value)
            await db.commit()
            await db.refresh(user)
        except IntegrityError as e:
            await db.rollback()
            logger.warning("User update hit unique constraint", user_id=user.id, error=str(e.orig))
            raise ConflictError("email", "The email has already been taken.")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("User update failed", user_id=user.id, error=str(e))
            raise StorageError("Failed to update user") from e

        logger.info("User updated successfully", user_id=user.id, fields=sorted(update_data))
        return user
