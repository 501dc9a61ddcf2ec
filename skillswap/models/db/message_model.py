import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from skillswap.database import Base


class MessageModel(Base):
    """SQLAlchemy model for messages table."""

    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # User and swap request references are weak: no FK, resolved at query time
    sender_id = Column(Uuid, nullable=True)
    recipient_id = Column(Uuid, nullable=False)
    subject = Column(String(200))
    content = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="direct")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    is_archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(DateTime(timezone=True))
    priority = Column(String(10), nullable=False, default="medium")
    related_swap_request_id = Column(Uuid)
    attachments = Column(JSON, default=list)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now()
    )

    # Read-only projections, loaded explicitly per query
    sender = relationship(
        "UserModel",
        primaryjoin="foreign(MessageModel.sender_id) == UserModel.id",
        viewonly=True,
        lazy="raise",
    )
    recipient = relationship(
        "UserModel",
        primaryjoin="foreign(MessageModel.recipient_id) == UserModel.id",
        viewonly=True,
        lazy="raise",
    )
    related_swap_request = relationship(
        "SwapRequestModel",
        primaryjoin="foreign(MessageModel.related_swap_request_id) == SwapRequestModel.id",
        viewonly=True,
        lazy="raise",
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # type IN ('direct', 'system', 'support', 'notification')
    # priority IN ('low', 'medium', 'high', 'urgent')


Index(
    "idx_messages_recipient_read_created",
    MessageModel.recipient_id,
    MessageModel.is_read,
    MessageModel.created_at.desc(),
)
Index(
    "idx_messages_sender_created",
    MessageModel.sender_id,
    MessageModel.created_at.desc(),
)
Index("idx_messages_type_priority", MessageModel.type, MessageModel.priority)
Index("idx_messages_archived", MessageModel.is_archived)
Index("idx_messages_swap_request", MessageModel.related_swap_request_id)
