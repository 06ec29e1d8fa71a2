"""
Dependency injection for FastAPI endpoints.
Provides the bearer token, the cache service and service instances.
"""
from typing import Any, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from json import JSONDecodeError

from ..core.exceptions import ValidationError
from ..core.redis import CacheService, get_cache_service
from ..services.auth_service import AuthService
from ..services.message_service import MessageService
from ..services.token_service import TokenService

# auto_error=False: a missing header must reach TokenService as TokenMissing
security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Raw bearer token from the Authorization header, if any."""
    if credentials is None:
        return None
    return credentials.credentials


async def get_json_body(request: Request) -> Any:
    """
    Request body as parsed JSON, or an empty dict when absent.

    Field validation happens in the services so every caller gets the
    same error format.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        raise ValidationError.for_field("body", "The request body must be valid JSON.")


def get_token_service(cache_service: CacheService = Depends(get_cache_service)) -> TokenService:
    return TokenService(cache_service)


def get_auth_service(token_service: TokenService = Depends(get_token_service)) -> AuthService:
    return AuthService(token_service)


def get_message_service(token_service: TokenService = Depends(get_token_service)) -> MessageService:
    return MessageService(token_service)
