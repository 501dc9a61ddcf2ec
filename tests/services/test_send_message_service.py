from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from skillswap.exceptions import ValidationError
from skillswap.models.api.messages import MessageDraft, MessageType
from skillswap.services.message_state_service import MessageStateService
from skillswap.services.send_message_service import SendMessageService


class TestSendMessageService:
    """Unit tests for SendMessageService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> SendMessageService:
        """SendMessageService instance."""
        return SendMessageService(mock_db)

    @pytest.mark.asyncio
    async def test_send_message_delegates_to_store(
        self, service: SendMessageService
    ) -> None:
        draft = {"sender_id": uuid4(), "recipient_id": uuid4(), "content": "Hello"}
        stored = MagicMock()

        with patch.object(
            service.message_repo,
            "create_message",
            new_callable=AsyncMock,
            return_value=stored,
        ) as mock_create:
            result = await service.send_message(draft)

        assert result is stored
        mock_create.assert_called_once_with(draft)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "draft",
        [
            {"recipient_id": str(uuid4()), "content": "hi", "type": "system"},
            MessageDraft(recipient_id=uuid4(), content="hi", type=MessageType.SYSTEM),
        ],
    )
    async def test_send_message_rejects_system_type(
        self, service: SendMessageService, draft: object
    ) -> None:
        with patch.object(
            service.message_repo, "create_message", new_callable=AsyncMock
        ) as mock_create:
            with pytest.raises(ValidationError) as exc_info:
                await service.send_message(draft)

        assert exc_info.value.errors[0]["field"] == "type"
        mock_create.assert_not_called()


class TestMessageStateService:
    """Unit tests for MessageStateService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> MessageStateService:
        return MessageStateService(mock_db)

    @pytest.mark.asyncio
    async def test_transitions_delegate_to_repository(
        self, service: MessageStateService
    ) -> None:
        message_id = uuid4()

        with (
            patch.object(
                service.message_repo, "mark_as_read", new_callable=AsyncMock
            ) as mock_read,
            patch.object(
                service.message_repo, "archive", new_callable=AsyncMock
            ) as mock_archive,
        ):
            await service.mark_as_read(message_id)
            await service.archive(message_id)

        mock_read.assert_called_once_with(message_id)
        mock_archive.assert_called_once_with(message_id)
