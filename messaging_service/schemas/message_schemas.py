"""
Message Pydantic schemas.
"""
from typing import Any, Dict, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.base import MAX_ID
from .validation import required_string


class MessageBodyRules(BaseModel):

    @field_validator("body", mode="before", check_fields=False)
    @classmethod
    def validate_body(cls, v: Any) -> str:
        return required_string("body", v)


class MessageCreate(MessageBodyRules):
    """Send message request schema."""

    receiver: int = Field(..., ge=1, le=MAX_ID, description="Receiving user's id")
    body: str = Field(..., description="Message text")

    model_config = ConfigDict(
        json_schema_extra={"example": {"receiver": 2, "body": "Hello there!"}}
    )


class MessageUpdate(MessageBodyRules):
    """Edit message request schema. Only the body can change."""

    body: str = Field(..., description="New message text")


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    body: str
    sender: int
    receiver: int
    created_at: datetime
    updated_at: datetime


class ConversationEntry(BaseModel):
    """One message inside a sender-labelled conversation group."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    body: str
    created_at: datetime


class MessageEnvelope(BaseModel):
    message: str
    data: MessageResponse


ConversationResponse = Dict[str, List[ConversationEntry]]
