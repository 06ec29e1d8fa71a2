"""
User model: the credential and profile record.
"""
import enum
from sqlalchemy import Column, String, Boolean, Text, Enum

from .base import BaseModel


class MaritalStatus(str, enum.Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class User(BaseModel):
    """Registered user. Email is unique across all rows."""

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    gender = Column(Boolean, nullable=False)
    marital_status = Column(
        Enum(
            MaritalStatus,
            name="marital_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            native_enum=False,
            length=16,
        ),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
