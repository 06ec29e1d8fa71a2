"""
Authentication and profile endpoints.
Implements register, login, logout and the caller's own profile.
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.auth_schemas import AuthResponse, ProfileResponse, ProfileUpdateResponse, StatusResponse
from ..schemas.user_schemas import UserResponse
from ..services.auth_service import AuthService
from .deps import get_auth_service, get_bearer_token, get_json_body

router = APIRouter(tags=["authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED
)
async def register(
    payload: Any = Depends(get_json_body),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account.

    - **name**, **email** (unique), **password** (min 6) with
      **password_confirmation**, **address**, **gender** (boolean-like),
      **marital_status** (single, married, divorced, widowed)

    Returns the created user and a bearer token.
    """
    user, token = await auth_service.register(db, payload)
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        token=token
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: Any = Depends(get_json_body),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for a fresh bearer token."""
    user, token = await auth_service.login(db, payload)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=token
    )


@router.post("/logout", response_model=StatusResponse)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Revoke the presented token. Other tokens of the same user stay valid."""
    await auth_service.logout(token)
    return StatusResponse(message="User logged out successfully")


@router.get("/users/me", response_model=ProfileResponse)
async def get_profile(
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    user = await auth_service.get_profile(db, token)
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.put("/users/me", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: Any = Depends(get_json_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Update any subset of name, email, password, address, gender, marital_status."""
    user = await auth_service.update_profile(db, token, payload)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user)
    )
