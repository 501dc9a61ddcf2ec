# Export all models
from .api import (
    Attachment,
    MessageDraft,
    MessageMetadata,
    MessagePriority,
    MessageResponse,
    MessageType,
    SwapEvent,
    SwapEventRequest,
    SwapRequestSummary,
    SystemMessageRequest,
    UnreadCountResponse,
    UserSummary,
)
from .db import (
    MessageModel,
    SwapRequestModel,
    UserModel,
)

__all__ = [
    # API models
    "Attachment",
    "MessageDraft",
    "MessageMetadata",
    "MessagePriority",
    "MessageResponse",
    "MessageType",
    "SwapEvent",
    "SwapEventRequest",
    "SwapRequestSummary",
    "SystemMessageRequest",
    "UnreadCountResponse",
    "UserSummary",
    # DB models
    "MessageModel",
    "SwapRequestModel",
    "UserModel",
]
