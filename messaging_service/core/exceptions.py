"""
Error taxonomy for the messaging service.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request; ``main`` installs one handler that renders them.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class MessagingServiceError(Exception):
    """Base class for all service errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(MessagingServiceError):
    """Malformed, missing or out-of-range input."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "VALIDATION_ERROR"
    default_message = "The given data was invalid"

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__(self.default_message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})

    def to_response(self) -> Dict[str, Any]:
        return self.errors


class AuthenticationError(MessagingServiceError):
    """Caller identity could not be established."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Unauthenticated"

    def to_response(self) -> Dict[str, Any]:
        return {"message": self.message}


class TokenMissing(AuthenticationError):
    default_message = "Token not provided"


class TokenMalformed(AuthenticationError):
    default_message = "Token is invalid"


class TokenExpired(AuthenticationError):
    default_message = "Token has expired"


class TokenRevoked(AuthenticationError):
    default_message = "The token has been blacklisted"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid credentials"

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class AuthorizationError(MessagingServiceError):
    """Valid caller, wrong principal."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION_ERROR"
    default_message = "Unauthorized"


class NotFoundError(MessagingServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(MessagingServiceError):
    """Unique constraint violated in the store."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource already exists"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message)


class StorageError(MessagingServiceError):
    """Unexpected persistence failure. Never retried."""

    error_code = "STORAGE_ERROR"
    default_message = "Internal server error"

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.default_message}
