"""
Authentication-related Pydantic schemas for request/response validation.
"""
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.config import settings
from .user_schemas import UserResponse
from .validation import check_password, normalize_email


class LoginRequest(BaseModel):
    """Login request schema."""

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "password123"
            }
        }
    )

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return normalize_email(v, settings.EMAIL_MAX_LENGTH)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        return check_password(v, settings.PASSWORD_MIN_LENGTH)


class AuthResponse(BaseModel):
    """Returned by register and login."""

    message: str = Field(..., description="Status message")
    user: UserResponse = Field(..., description="User information")
    token: str = Field(..., description="Bearer token")


class ProfileResponse(BaseModel):
    user: UserResponse


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class StatusResponse(BaseModel):
    """Plain acknowledgement, e.g. logout or delete."""

    message: str = Field(..., description="Status message")
