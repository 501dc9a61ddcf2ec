from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillswap.models.api.messages import MessageMetadata, MessagePriority


class SwapEvent(str, Enum):
    """Swap-request lifecycle transitions that notify a user."""

    CREATED = "created"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SystemMessageRequest(BaseModel):
    """Request model for creating a system message."""

    recipient_id: UUID
    content: str
    subject: Optional[str] = None
    priority: Optional[MessagePriority] = None
    related_swap_request_id: Optional[UUID] = None
    metadata: Optional[MessageMetadata] = None

    model_config = ConfigDict(extra="forbid")


class SwapEventRequest(BaseModel):
    """Request model for a swap-request lifecycle notification."""

    event: SwapEvent
    recipient_id: UUID
    swap_request_id: UUID
    actor_name: Optional[str] = Field(
        default=None, description="Display name of the user who caused the event"
    )
    skill_offered: Optional[str] = None
    skill_wanted: Optional[str] = None

    model_config = ConfigDict(extra="forbid")
