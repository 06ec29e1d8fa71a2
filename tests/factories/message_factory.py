"""
Message factory for testing.
"""
import factory
from factory import Faker

from messaging_service.models.message import Message


class MessageFactory(factory.Factory):
    """Factory for Message model. Pass sender and receiver user ids."""

    class Meta:
        model = Message

    body = Faker('sentence', nb_words=8)
    sender = None
    receiver = None
