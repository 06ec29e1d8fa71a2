"""
User-related Pydantic schemas for request/response validation.
"""
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..core.config import settings
from ..models.user import MaritalStatus
from .validation import check_password, coerce_boolean, normalize_email, required_string


class ProfileFieldRules(BaseModel):
    """
    Field rules shared by registration and profile update.

    Validators only run for fields that are present in the payload, so the
    same rules give "required" semantics on registration and "sometimes"
    semantics on update.
    """

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return required_string("name", v, max_length=settings.NAME_MAX_LENGTH)

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return normalize_email(v, settings.EMAIL_MAX_LENGTH)

    @field_validator("password", mode="before", check_fields=False)
    @classmethod
    def validate_password(cls, v: Any, info: ValidationInfo) -> str:
        password = check_password(v, settings.PASSWORD_MIN_LENGTH)
        # password_confirmation is declared before password, so it is in info.data
        if info.data.get("password_confirmation") != password:
            raise ValueError("The password field confirmation does not match.")
        return password

    @field_validator("address", mode="before", check_fields=False)
    @classmethod
    def validate_address(cls, v: Any) -> str:
        return required_string("address", v)

    @field_validator("gender", mode="before", check_fields=False)
    @classmethod
    def validate_gender(cls, v: Any) -> bool:
        return coerce_boolean("gender", v)

    @field_validator("marital_status", mode="before", check_fields=False)
    @classmethod
    def validate_marital_status(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("The marital status field is required.")
        if isinstance(v, str):
            return v.strip()
        return v


class RegistrationRequest(ProfileFieldRules):
    """User registration request schema."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User's email address (must be unique)")
    password_confirmation: Optional[str] = Field(None, description="Must match password")
    password: str = Field(..., description="User's password")
    address: str = Field(..., description="Postal address")
    gender: bool = Field(..., description="Gender flag")
    marital_status: MaritalStatus = Field(..., description="single, married, divorced or widowed")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "John Doe",
                "email": "john.doe@example.com",
                "password": "password123",
                "password_confirmation": "password123",
                "address": "123 Main Street, Springfield",
                "gender": True,
                "marital_status": "single"
            }
        }
    )


class ProfileUpdateRequest(ProfileFieldRules):
    """Profile update request schema. Only supplied fields are applied."""

    name: Optional[str] = None
    email: Optional[str] = None
    password_confirmation: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[bool] = None
    marital_status: Optional[MaritalStatus] = None

    def changes(self) -> dict:
        """Fields the client actually sent, minus the confirmation helper."""
        data = self.model_dump(exclude_unset=True)
        data.pop("password_confirmation", None)
        return data


class UserResponse(BaseModel):
    """User response schema for API responses. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User's email address")
    address: str = Field(..., description="Postal address")
    gender: bool = Field(..., description="Gender flag")
    marital_status: MaritalStatus = Field(..., description="Marital status")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
