from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.exceptions import NotFoundError, ValidationError
from skillswap.models.api.messages import MessageResponse, MessageType
from skillswap.repositories.message_repository import MessageRepository

MAX_PAGE_SIZE = 1000


class MailboxService:
    """Service for inbox, sent-items and conversation views."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)

    async def get_inbox(
        self,
        user_id: UUID,
        limit: int = 20,
        skip: int = 0,
        unread_only: bool = False,
        message_type: Optional[MessageType] = None,
        include_archived: bool = True,
    ) -> List[MessageResponse]:
        """
        Get a user's inbox:

        1. Validate pagination and filters
        2. Select messages received by the user, newest first
        3. Resolve sender and related swap request projections

        Archived messages are included unless include_archived is False.
        """
        self._validate_pagination(limit, skip)
        if message_type is not None:
            try:
                message_type = MessageType(message_type)
            except ValueError as e:
                raise ValidationError.for_field(
                    "type", f"Unknown message type: {message_type}", "enum"
                ) from e

        return await self.message_repo.get_inbox(
            user_id,
            limit=limit,
            skip=skip,
            unread_only=unread_only,
            message_type=message_type,
            include_archived=include_archived,
        )

    async def get_sent_messages(
        self, user_id: UUID, limit: int = 20, skip: int = 0
    ) -> List[MessageResponse]:
        """Get messages sent by a user, newest first."""
        self._validate_pagination(limit, skip)
        return await self.message_repo.get_sent_messages(user_id, limit=limit, skip=skip)

    async def get_conversation(
        self, user_a: UUID, user_b: UUID, limit: int = 50, skip: int = 0
    ) -> List[MessageResponse]:
        """Get the conversation between two users, newest first.

        Reverse the result for chronological display.
        """
        self._validate_pagination(limit, skip)
        return await self.message_repo.get_conversation(
            user_a, user_b, limit=limit, skip=skip
        )

    async def count_unread(self, user_id: UUID, include_archived: bool = True) -> int:
        return await self.message_repo.count_unread(
            user_id, include_archived=include_archived
        )

    async def get_message(self, message_id: UUID) -> MessageResponse:
        """Get detailed information about a specific message"""
        message = await self.message_repo.get_resolved(message_id)
        if not message:
            raise NotFoundError(f"Message {message_id} not found")
        return message

    def _validate_pagination(self, limit: int, skip: int) -> None:
        errors = []
        if limit <= 0 or limit > MAX_PAGE_SIZE:
            errors.append(
                {
                    "field": "limit",
                    "message": f"Limit must be between 1 and {MAX_PAGE_SIZE}",
                    "type": "range",
                }
            )
        if skip < 0:
            errors.append(
                {"field": "skip", "message": "Skip must be non-negative", "type": "range"}
            )
        if errors:
            raise ValidationError(errors)
