from typing import Any, Dict, Mapping, Optional, Tuple, Union
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.models.api.messages import (
    MessageMetadata,
    MessagePriority,
    MessageResponse,
)
from skillswap.models.api.system_messages import SwapEvent
from skillswap.repositories.base_repository import Clock
from skillswap.repositories.message_repository import MessageRepository

logger = structlog.get_logger(__name__)

SWAP_CATEGORY = "swap_request"

# event -> (subject, content template, priority)
SWAP_TEMPLATES: Dict[SwapEvent, Tuple[str, str, MessagePriority]] = {
    SwapEvent.CREATED: (
        "New Swap Request",
        "{actor} would like to swap {offered} for your {wanted}.",
        MessagePriority.HIGH,
    ),
    SwapEvent.ACCEPTED: (
        "Swap Request Accepted",
        "{actor} accepted your swap request: {offered} for {wanted}.",
        MessagePriority.HIGH,
    ),
    SwapEvent.REJECTED: (
        "Swap Request Declined",
        "{actor} declined your swap request: {offered} for {wanted}.",
        MessagePriority.MEDIUM,
    ),
    SwapEvent.CANCELLED: (
        "Swap Request Cancelled",
        "{actor} cancelled the swap request: {offered} for {wanted}.",
        MessagePriority.MEDIUM,
    ),
    SwapEvent.COMPLETED: (
        "Swap Completed",
        "Your swap with {actor} is complete: {offered} for {wanted}. "
        "Don't forget to leave feedback!",
        MessagePriority.LOW,
    ),
}


class SystemMessageService:
    """Service that turns platform events into system messages.

    Each call creates exactly one message. Retries and idempotency are the
    caller's responsibility; errors from the store propagate unchanged.
    """

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        self.db = db
        self.message_repo = MessageRepository(db, clock=clock)

    async def create_system_message(
        self,
        recipient_id: UUID,
        content: str,
        subject: Optional[str] = None,
        priority: Optional[MessagePriority] = None,
        related_swap_request_id: Optional[UUID] = None,
        metadata: Optional[Union[MessageMetadata, Mapping[str, Any]]] = None,
    ) -> MessageResponse:
        message = await self.message_repo.create_system_message(
            recipient_id,
            content,
            subject=subject,
            priority=priority,
            related_swap_request_id=related_swap_request_id,
            metadata=metadata,
        )
        logger.info(
            "system_message_created",
            message_id=str(message.id),
            recipient_id=str(recipient_id),
            template_id=message.metadata.template_id,
        )
        return message

    async def notify_swap_event(
        self,
        event: SwapEvent,
        recipient_id: UUID,
        swap_request_id: UUID,
        actor_name: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
    ) -> MessageResponse:
        """Notify a user about a swap-request lifecycle transition."""
        event = SwapEvent(event)
        subject, template, priority = SWAP_TEMPLATES[event]
        content = template.format(
            actor=actor_name or "Another member",
            offered=skill_offered or "a skill",
            wanted=skill_wanted or "a skill",
        )
        return await self.create_system_message(
            recipient_id,
            content,
            subject=subject,
            priority=priority,
            related_swap_request_id=swap_request_id,
            metadata={
                "category": SWAP_CATEGORY,
                "tags": ["swap", event.value],
                "template_id": f"swap_{event.value}",
            },
        )
