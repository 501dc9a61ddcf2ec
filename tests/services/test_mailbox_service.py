from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from skillswap.exceptions import NotFoundError, ValidationError
from skillswap.models.api.messages import MessageType
from skillswap.repositories.message_repository import MessageRepository
from skillswap.services.mailbox_service import MailboxService


class TestMailboxService:
    """Unit tests for MailboxService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> MailboxService:
        """MailboxService instance."""
        return MailboxService(mock_db)

    def test_service_initialization(self, mock_db: AsyncMock) -> None:
        service = MailboxService(mock_db)
        assert service.db == mock_db
        assert isinstance(service.message_repo, MessageRepository)

    @pytest.mark.asyncio
    async def test_get_inbox_passes_filters(self, service: MailboxService) -> None:
        user_id = uuid4()

        with patch.object(
            service.message_repo, "get_inbox", new_callable=AsyncMock, return_value=[]
        ) as mock_get_inbox:
            result = await service.get_inbox(
                user_id, limit=5, skip=10, unread_only=True, message_type="system"
            )

        assert result == []
        mock_get_inbox.assert_called_once_with(
            user_id,
            limit=5,
            skip=10,
            unread_only=True,
            message_type=MessageType.SYSTEM,
            include_archived=True,
        )

    @pytest.mark.asyncio
    async def test_get_inbox_unknown_type(self, service: MailboxService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.get_inbox(uuid4(), message_type="broadcast")

        assert exc_info.value.errors[0]["field"] == "type"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "limit,skip,fields",
        [
            (0, 0, {"limit"}),
            (1001, 0, {"limit"}),
            (20, -1, {"skip"}),
            (-5, -5, {"limit", "skip"}),
        ],
    )
    async def test_invalid_pagination(
        self, service: MailboxService, limit: int, skip: int, fields: set
    ) -> None:
        with patch.object(
            service.message_repo, "get_conversation", new_callable=AsyncMock
        ) as mock_get_conversation:
            with pytest.raises(ValidationError) as exc_info:
                await service.get_conversation(uuid4(), uuid4(), limit=limit, skip=skip)

        assert {error["field"] for error in exc_info.value.errors} == fields
        mock_get_conversation.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_sent_messages_defaults(self, service: MailboxService) -> None:
        user_id = uuid4()

        with patch.object(
            service.message_repo,
            "get_sent_messages",
            new_callable=AsyncMock,
            return_value=[],
        ) as mock_get_sent:
            await service.get_sent_messages(user_id)

        mock_get_sent.assert_called_once_with(user_id, limit=20, skip=0)

    @pytest.mark.asyncio
    async def test_get_message_not_found(self, service: MailboxService) -> None:
        with patch.object(
            service.message_repo,
            "get_resolved",
            new_callable=AsyncMock,
            return_value=None,
        ):
            with pytest.raises(NotFoundError):
                await service.get_message(uuid4())
