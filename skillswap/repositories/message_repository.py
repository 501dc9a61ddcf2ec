from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skillswap.config import SYSTEM_MESSAGE_SUBJECT
from skillswap.exceptions import NotFoundError
from skillswap.models.api.messages import (
    MessageDraft,
    MessageMetadata,
    MessagePriority,
    MessageResponse,
    MessageType,
    SwapRequestSummary,
    UserSummary,
    build_draft,
)
from skillswap.models.db.message_model import MessageModel
from skillswap.models.db.swap_request_model import SwapRequestModel
from skillswap.models.db.user_model import UserModel
from skillswap.repositories.base_repository import BaseRepository, Clock

logger = structlog.get_logger(__name__)

# Relationship name -> projected columns of the referenced row
Projections = Dict[str, Sequence[Any]]

SWAP_REQUEST_FIELDS = (
    SwapRequestModel.skill_offered,
    SwapRequestModel.skill_wanted,
    SwapRequestModel.status,
)
USER_BRIEF_FIELDS = (UserModel.name, UserModel.avatar)
USER_ROLE_FIELDS = (UserModel.name, UserModel.avatar, UserModel.role)

INBOX_PROJECTIONS: Projections = {
    "sender": USER_ROLE_FIELDS,
    "related_swap_request": SWAP_REQUEST_FIELDS,
}
SENT_PROJECTIONS: Projections = {
    "recipient": USER_BRIEF_FIELDS,
    "related_swap_request": SWAP_REQUEST_FIELDS,
}
CONVERSATION_PROJECTIONS: Projections = {
    "sender": USER_BRIEF_FIELDS,
    "recipient": USER_BRIEF_FIELDS,
}
DETAIL_PROJECTIONS: Projections = {
    "sender": USER_ROLE_FIELDS,
    "recipient": USER_ROLE_FIELDS,
    "related_swap_request": SWAP_REQUEST_FIELDS,
}


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        super().__init__(db, MessageModel, clock=clock)

    async def create_message(
        self, draft: Union[MessageDraft, Mapping[str, Any]]
    ) -> MessageResponse:
        """Validate a draft and persist it as a new message."""
        draft = build_draft(draft)
        now = self.clock()
        message = MessageResponse(
            id=uuid4(),
            sender_id=draft.sender_id,
            recipient_id=draft.recipient_id,
            subject=draft.subject,
            content=draft.content,
            type=draft.type,
            priority=draft.priority,
            is_read=False,
            read_at=None,
            is_archived=False,
            archived_at=None,
            related_swap_request_id=draft.related_swap_request_id,
            attachments=draft.attachments,
            metadata=draft.metadata,
            created_at=now,
            updated_at=now,
        )
        created = await self.create(message)
        logger.info(
            "message_created",
            message_id=str(created.id),
            recipient_id=str(created.recipient_id),
            type=created.type.value,
        )
        return created

    async def create_system_message(
        self,
        recipient_id: UUID,
        content: str,
        subject: Optional[str] = None,
        priority: Optional[MessagePriority] = None,
        related_swap_request_id: Optional[UUID] = None,
        metadata: Optional[Union[MessageMetadata, Mapping[str, Any]]] = None,
    ) -> MessageResponse:
        """Create a sender-less, auto-generated system message."""
        if isinstance(metadata, MessageMetadata):
            metadata = metadata.model_dump()
        return await self.create_message(
            {
                "sender_id": None,
                "recipient_id": recipient_id,
                "content": content,
                "type": MessageType.SYSTEM,
                "subject": subject or SYSTEM_MESSAGE_SUBJECT,
                "priority": priority or MessagePriority.MEDIUM,
                "related_swap_request_id": related_swap_request_id,
                "metadata": {**(metadata or {}), "auto_generated": True},
            }
        )

    async def mark_as_read(self, message_id: UUID) -> MessageResponse:
        """Latch a message as read.

        The write only applies while ``is_read`` is false, so ``read_at`` keeps
        the first reader's timestamp under concurrent calls.
        """
        now = self.clock()
        statement = (
            update(self.model_class)
            .where(
                self.model_class.id == message_id,
                self.model_class.is_read.is_(False),
            )
            .values(is_read=True, read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        async with self._store_operation("mark_as_read"):
            result = await self.db.execute(statement)
            await self.db.commit()

        message = await self.get_by_id(message_id)
        if message is None:
            raise NotFoundError(f"Message {message_id} not found")
        if result.rowcount:
            logger.info("message_marked_read", message_id=str(message_id))
        return message

    async def archive(self, message_id: UUID) -> MessageResponse:
        """Archive a message, stamping archived_at with the current time."""
        now = self.clock()
        statement = (
            update(self.model_class)
            .where(self.model_class.id == message_id)
            .values(is_archived=True, archived_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        async with self._store_operation("archive"):
            result = await self.db.execute(statement)
            await self.db.commit()

        if not result.rowcount:
            raise NotFoundError(f"Message {message_id} not found")
        message = await self.get_by_id(message_id)
        if message is None:
            raise NotFoundError(f"Message {message_id} not found")
        logger.info("message_archived", message_id=str(message_id))
        return message

    async def get_resolved(self, message_id: UUID) -> Optional[MessageResponse]:
        """Get a message with sender, recipient and swap request resolved."""
        query = select(self.model_class).where(self.model_class.id == message_id)
        messages = await self._fetch(query, DETAIL_PROJECTIONS)
        return messages[0] if messages else None

    async def get_inbox(
        self,
        user_id: UUID,
        limit: int = 20,
        skip: int = 0,
        unread_only: bool = False,
        message_type: Optional[MessageType] = None,
        include_archived: bool = True,
    ) -> List[MessageResponse]:
        """Get messages received by a user, newest first."""
        query = select(self.model_class).where(self.model_class.recipient_id == user_id)
        if unread_only:
            query = query.where(self.model_class.is_read.is_(False))
        if message_type is not None:
            query = query.where(self.model_class.type == MessageType(message_type).value)
        if not include_archived:
            query = query.where(self.model_class.is_archived.is_(False))
        return await self._fetch_page(query, INBOX_PROJECTIONS, limit, skip)

    async def get_sent_messages(
        self, user_id: UUID, limit: int = 20, skip: int = 0
    ) -> List[MessageResponse]:
        """Get messages sent by a user, newest first."""
        query = select(self.model_class).where(self.model_class.sender_id == user_id)
        return await self._fetch_page(query, SENT_PROJECTIONS, limit, skip)

    async def get_conversation(
        self, user_a: UUID, user_b: UUID, limit: int = 50, skip: int = 0
    ) -> List[MessageResponse]:
        """Get messages exchanged between two users in either direction."""
        query = select(self.model_class).where(
            or_(
                and_(
                    self.model_class.sender_id == user_a,
                    self.model_class.recipient_id == user_b,
                ),
                and_(
                    self.model_class.sender_id == user_b,
                    self.model_class.recipient_id == user_a,
                ),
            )
        )
        return await self._fetch_page(query, CONVERSATION_PROJECTIONS, limit, skip)

    async def count_unread(self, user_id: UUID, include_archived: bool = True) -> int:
        """Count unread messages in a user's inbox."""
        query = (
            select(func.count())
            .select_from(self.model_class)
            .where(
                self.model_class.recipient_id == user_id,
                self.model_class.is_read.is_(False),
            )
        )
        if not include_archived:
            query = query.where(self.model_class.is_archived.is_(False))
        async with self._store_operation("count_unread"):
            result = await self.db.execute(query)
            return int(result.scalar_one())

    async def _fetch_page(
        self, query: Any, projections: Projections, limit: int, skip: int
    ) -> List[MessageResponse]:
        # id breaks ties between equal timestamps
        query = (
            query.order_by(
                self.model_class.created_at.desc(), self.model_class.id.asc()
            )
            .offset(skip)
            .limit(limit)
        )
        return await self._fetch(query, projections)

    async def _fetch(self, query: Any, projections: Projections) -> List[MessageResponse]:
        for name, columns in projections.items():
            query = query.options(
                selectinload(getattr(self.model_class, name)).load_only(*columns)
            )
        query = query.execution_options(populate_existing=True)
        async with self._store_operation("query"):
            result = await self.db.execute(query)
            db_models = result.scalars().all()
        return [self._to_pydantic(db_model, projections) for db_model in db_models]

    def _to_pydantic(
        self, db_model: Any, projections: Optional[Projections] = None
    ) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        projections = projections or {}
        message = MessageResponse(
            id=db_model.id,
            sender_id=db_model.sender_id,
            recipient_id=db_model.recipient_id,
            subject=db_model.subject,
            content=db_model.content,
            type=db_model.type,
            priority=db_model.priority,
            is_read=db_model.is_read,
            read_at=db_model.read_at,
            is_archived=db_model.is_archived,
            archived_at=db_model.archived_at,
            related_swap_request_id=db_model.related_swap_request_id,
            attachments=db_model.attachments or [],
            metadata=db_model.meta or {},
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )

        if "sender" in projections and db_model.sender_id is not None:
            message.sender = UserSummary(
                id=db_model.sender_id,
                **_project(db_model.sender, projections["sender"]),
            )
        if "recipient" in projections:
            message.recipient = UserSummary(
                id=db_model.recipient_id,
                **_project(db_model.recipient, projections["recipient"]),
            )
        if (
            "related_swap_request" in projections
            and db_model.related_swap_request_id is not None
        ):
            message.related_swap_request = SwapRequestSummary(
                id=db_model.related_swap_request_id,
                **_project(
                    db_model.related_swap_request,
                    projections["related_swap_request"],
                ),
            )
        return message

    def _from_pydantic(self, pydantic_model: MessageResponse) -> MessageModel:
        """Convert Pydantic MessageResponse to SQLAlchemy MessageModel."""
        return MessageModel(
            id=pydantic_model.id,
            sender_id=pydantic_model.sender_id,
            recipient_id=pydantic_model.recipient_id,
            subject=pydantic_model.subject,
            content=pydantic_model.content,
            type=pydantic_model.type.value,
            priority=pydantic_model.priority.value,
            is_read=pydantic_model.is_read,
            read_at=pydantic_model.read_at,
            is_archived=pydantic_model.is_archived,
            archived_at=pydantic_model.archived_at,
            related_swap_request_id=pydantic_model.related_swap_request_id,
            attachments=[a.model_dump() for a in pydantic_model.attachments],
            meta=pydantic_model.metadata.model_dump(),
            created_at=pydantic_model.created_at,
            updated_at=pydantic_model.updated_at,
        )


def _project(row: Any, columns: Sequence[Any]) -> Dict[str, Any]:
    """Pick projected values off a referenced row; dangling references give {}."""
    if row is None:
        return {}
    return {column.key: getattr(row, column.key) for column in columns}
