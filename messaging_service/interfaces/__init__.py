"""
Interfaces for dependency abstraction.
"""

from .cache_interface import ICacheService
from .repository_interface import IUserRepository, IMessageRepository

__all__ = ["ICacheService", "IUserRepository", "IMessageRepository"]
