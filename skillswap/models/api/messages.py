from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from skillswap.exceptions import ValidationError

SUBJECT_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000


class MessageType(str, Enum):
    DIRECT = "direct"
    SYSTEM = "system"
    SUPPORT = "support"
    NOTIFICATION = "notification"


class MessagePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Attachment(BaseModel):
    """File attached to a message."""

    filename: Optional[str] = None
    original_name: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=0)
    url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class MessageMetadata(BaseModel):
    """Classification data attached to a message."""

    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    auto_generated: bool = False
    template_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, tags: List[str]) -> List[str]:
        # Tags behave as a set; first occurrence keeps its position
        return list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))


class MessageDraft(BaseModel):
    """Input for creating a message."""

    sender_id: Optional[UUID] = Field(
        default=None, description="Sending user, absent only for system messages"
    )
    recipient_id: UUID = Field(..., description="Receiving user")
    subject: Optional[str] = Field(default=None, max_length=SUBJECT_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)
    type: MessageType = MessageType.DIRECT
    priority: MessagePriority = MessagePriority.MEDIUM
    related_swap_request_id: Optional[UUID] = None
    attachments: List[Attachment] = Field(default_factory=list)
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("subject")
    @classmethod
    def _blank_subject_is_none(cls, subject: Optional[str]) -> Optional[str]:
        return subject or None

    def invariant_errors(self) -> List[Dict[str, str]]:
        """Cross-field rules that single-field validation cannot express."""
        errors = []
        if self.type == MessageType.SYSTEM:
            if self.sender_id is not None:
                errors.append(
                    {
                        "field": "sender_id",
                        "message": "System messages cannot have a sender",
                        "type": "sender_forbidden",
                    }
                )
        else:
            if self.sender_id is None:
                errors.append(
                    {
                        "field": "sender_id",
                        "message": "Sender is required",
                        "type": "missing",
                    }
                )
            if self.metadata.auto_generated:
                errors.append(
                    {
                        "field": "metadata.auto_generated",
                        "message": "Only system messages can be auto-generated",
                        "type": "auto_generated_forbidden",
                    }
                )
        return errors


def build_draft(data: Union[MessageDraft, Mapping[str, Any]]) -> MessageDraft:
    """Validate raw input into a MessageDraft or raise ValidationError."""
    if isinstance(data, MessageDraft):
        # Re-run field validation, the draft may have been mutated after construction
        data = data.model_dump()
    try:
        draft = MessageDraft.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e

    errors = draft.invariant_errors()
    if errors:
        raise ValidationError(errors)
    return draft


class UserSummary(BaseModel):
    """Display projection of a referenced user.

    Only ``id`` is guaranteed; the other fields are null when the view does not
    request them or the user no longer exists.
    """

    id: UUID
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[str] = None


class SwapRequestSummary(BaseModel):
    """Display projection of a referenced swap request."""

    id: UUID
    skill_offered: Optional[str] = None
    skill_wanted: Optional[str] = None
    status: Optional[str] = None


class MessageResponse(BaseModel):
    """Response model for message data."""

    id: UUID
    sender_id: Optional[UUID]
    recipient_id: UUID
    subject: Optional[str]
    content: str
    type: MessageType
    priority: MessagePriority
    is_read: bool
    read_at: Optional[datetime]
    is_archived: bool
    archived_at: Optional[datetime]
    related_swap_request_id: Optional[UUID]
    attachments: List[Attachment]
    metadata: MessageMetadata
    created_at: datetime
    updated_at: datetime

    # Resolved references, populated per view
    sender: Optional[UserSummary] = None
    recipient: Optional[UserSummary] = None
    related_swap_request: Optional[SwapRequestSummary] = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    user_id: UUID
    unread_count: int
