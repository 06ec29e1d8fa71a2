"""
Business logic services.
"""

from .token_service import TokenService
from .auth_service import AuthService
from .message_service import MessageService

__all__ = ["TokenService", "AuthService", "MessageService"]
