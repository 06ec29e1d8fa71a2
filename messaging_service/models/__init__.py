"""Database models."""

from .base import MAX_ID, Base, BaseModel
from .user import User, MaritalStatus
from .message import Message

__all__ = ["MAX_ID", "Base", "BaseModel", "User", "MaritalStatus", "Message"]
