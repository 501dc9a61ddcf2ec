# Repository classes for database operations
from .base_repository import BaseRepository
from .message_repository import MessageRepository

__all__ = [
    "BaseRepository",
    "MessageRepository",
]
