# API models for request/response contracts
from .messages import (
    Attachment,
    MessageDraft,
    MessageMetadata,
    MessagePriority,
    MessageResponse,
    MessageType,
    SwapRequestSummary,
    UnreadCountResponse,
    UserSummary,
    build_draft,
)
from .system_messages import SwapEvent, SwapEventRequest, SystemMessageRequest

__all__ = [
    "Attachment",
    "MessageDraft",
    "MessageMetadata",
    "MessagePriority",
    "MessageResponse",
    "MessageType",
    "SwapRequestSummary",
    "UnreadCountResponse",
    "UserSummary",
    "build_draft",
    "SwapEvent",
    "SwapEventRequest",
    "SystemMessageRequest",
]
