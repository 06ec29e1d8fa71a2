"""Test data factories for messaging service testing."""

from .user_factory import DEFAULT_PASSWORD, RegistrationPayloadFactory, UserFactory
from .message_factory import MessageFactory

__all__ = [
    "DEFAULT_PASSWORD",
    "UserFactory",
    "RegistrationPayloadFactory",
    "MessageFactory"
]
