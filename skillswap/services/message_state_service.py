from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.models.api.messages import MessageResponse
from skillswap.repositories.base_repository import Clock
from skillswap.repositories.message_repository import MessageRepository


class MessageStateService:
    """Service for the read and archive latches of a message."""

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        self.db = db
        self.message_repo = MessageRepository(db, clock=clock)

    async def mark_as_read(self, message_id: UUID) -> MessageResponse:
        """Mark a message read; already-read messages are returned unchanged."""
        return await self.message_repo.mark_as_read(message_id)

    async def archive(self, message_id: UUID) -> MessageResponse:
        """Archive a message. Archiving again refreshes archived_at."""
        return await self.message_repo.archive(message_id)
