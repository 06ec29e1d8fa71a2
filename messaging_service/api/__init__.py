"""
HTTP API routers.
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .messages import router as messages_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(messages_router)

__all__ = ["api_router"]
