"""
Direct message endpoints.
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models.base import MAX_ID
from ..schemas.auth_schemas import StatusResponse
from ..schemas.message_schemas import ConversationResponse, MessageEnvelope, MessageResponse
from ..services.message_service import MessageService
from .deps import get_bearer_token, get_json_body, get_message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/{contact_id}", response_model=ConversationResponse)
async def get_messages(
    contact_id: int = Path(..., ge=1, le=MAX_ID),
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    message_service: MessageService = Depends(get_message_service)
):
    """
    Conversation between the caller and ``contact_id``, oldest first,
    grouped under each sender's display name.
    """
    messages = await message_service.list_conversation(db, token, contact_id)
    return await message_service.group_by_sender(db, messages)


@router.post("", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: Any = Depends(get_json_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    message_service: MessageService = Depends(get_message_service)
):
    """Send **body** to the user with id **receiver**."""
    message = await message_service.send(db, token, payload)
    return MessageEnvelope(
        message="Message sent successfully",
        data=MessageResponse.model_validate(message)
    )


@router.put("/{message_id}", response_model=MessageEnvelope)
async def update_message(
    message_id: int = Path(..., ge=1, le=MAX_ID),
    payload: Any = Depends(get_json_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    message_service: MessageService = Depends(get_message_service)
):
    """Edit the body of a message you sent."""
    message = await message_service.update(db, token, message_id, payload)
    return MessageEnvelope(
        message="Message updated successfully",
        data=MessageResponse.model_validate(message)
    )


@router.delete("/{message_id}", response_model=StatusResponse)
async def delete_message(
    message_id: int = Path(..., ge=1, le=MAX_ID),
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    message_service: MessageService = Depends(get_message_service)
):
    """Delete a message you sent."""
    await message_service.delete(db, token, message_id)
    return StatusResponse(message="Message deleted successfully")
