from typing import Any, Mapping, Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.exceptions import ValidationError
from skillswap.models.api.messages import MessageDraft, MessageResponse, MessageType
from skillswap.repositories.base_repository import Clock
from skillswap.repositories.message_repository import MessageRepository

logger = structlog.get_logger(__name__)


class SendMessageService:
    """Service for sending user-authored messages."""

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        self.db = db
        self.message_repo = MessageRepository(db, clock=clock)

    async def send_message(
        self, draft: Union[MessageDraft, Mapping[str, Any]]
    ) -> MessageResponse:
        """
        Send a direct, support or notification message:

        1. Reject system messages, they come from the system message generator
        2. Validate and persist the draft
        3. Return the stored message
        """
        message_type = (
            draft.type if isinstance(draft, MessageDraft) else draft.get("type")
        )
        if message_type in (MessageType.SYSTEM, MessageType.SYSTEM.value):
            raise ValidationError.for_field(
                "type",
                "System messages can only be created by the platform",
                "system_type_forbidden",
            )

        message = await self.message_repo.create_message(draft)
        logger.info(
            "message_sent",
            message_id=str(message.id),
            sender_id=str(message.sender_id),
            recipient_id=str(message.recipient_id),
        )
        return message
