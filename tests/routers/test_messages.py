from datetime import datetime, timezone
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from skillswap.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from skillswap.models.api.messages import MessageResponse


def sample_message(**overrides: Any) -> MessageResponse:
    now = datetime.now(timezone.utc)
    data: Dict[str, Any] = {
        "id": uuid4(),
        "sender_id": uuid4(),
        "recipient_id": uuid4(),
        "subject": None,
        "content": "Test message",
        "type": "direct",
        "priority": "medium",
        "is_read": False,
        "read_at": None,
        "is_archived": False,
        "archived_at": None,
        "related_swap_request_id": None,
        "attachments": [],
        "metadata": {},
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return MessageResponse(**data)


class TestMessagesRouter:
    """Unit tests for the messages router endpoints."""

    @pytest.fixture
    def sample_message_request(self) -> dict:
        return {
            "sender_id": str(uuid4()),
            "recipient_id": str(uuid4()),
            "content": "Test message",
        }

    def test_send_message_calls_service(
        self, api_client: TestClient, sample_message_request: dict
    ) -> None:
        response_message = sample_message()

        with patch("skillswap.routers.messages.SendMessageService") as mock_service_class:
            mock_service = MagicMock()
            mock_service.send_message = AsyncMock(return_value=response_message)
            mock_service_class.return_value = mock_service

            response = api_client.post("/api/messages", json=sample_message_request)

        assert response.status_code == 201
        assert response.json()["id"] == str(response_message.id)
        mock_service.send_message.assert_called_once_with(sample_message_request)

    def test_send_message_validation_error(
        self, api_client: TestClient, sample_message_request: dict
    ) -> None:
        error = ValidationError(
            [
                {
                    "field": "content",
                    "message": "String should have at most 5000 characters",
                    "type": "string_too_long",
                }
            ]
        )

        with patch("skillswap.routers.messages.SendMessageService") as mock_service_class:
            mock_service = MagicMock()
            mock_service.send_message = AsyncMock(side_effect=error)
            mock_service_class.return_value = mock_service

            response = api_client.post("/api/messages", json=sample_message_request)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["errors"][0]["field"] == "content"

    def test_send_message_store_unavailable(
        self, api_client: TestClient, sample_message_request: dict
    ) -> None:
        with patch("skillswap.routers.messages.SendMessageService") as mock_service_class:
            mock_service = MagicMock()
            mock_service.send_message = AsyncMock(
                side_effect=StoreUnavailableError("down")
            )
            mock_service_class.return_value = mock_service

            response = api_client.post("/api/messages", json=sample_message_request)

        assert response.status_code == 503

    def test_send_message_unexpected_error(
        self, api_client: TestClient, sample_message_request: dict
    ) -> None:
        with patch("skillswap.routers.messages.SendMessageService") as mock_service_class:
            mock_service = MagicMock()
            mock_service.send_message = AsyncMock(side_effect=RuntimeError("boom"))
            mock_service_class.return_value = mock_service

            response = api_client.post("/api/messages", json=sample_message_request)

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"

    def test_endpoint_with_malformed_json(self, api_client: TestClient) -> None:
        response = api_client.post(
            "/api/messages",
            content=b"invalid json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_mark_read_calls_state_service(self, api_client: TestClient) -> None:
        message = sample_message(is_read=True, read_at=datetime.now(timezone.utc))

        with patch(
            "skillswap.routers.messages.MessageStateService"
        ) as mock_service_class:
            mock_service = MagicMock()
            mock_service.mark_as_read = AsyncMock(return_value=message)
            mock_service_class.return_value = mock_service

            response = api_client.post(f"/api/messages/{message.id}/read")

        assert response.status_code == 200
        assert response.json()["is_read"] is True
        mock_service.mark_as_read.assert_called_once_with(message.id)

    def test_archive_unknown_message(self, api_client: TestClient) -> None:
        with patch(
            "skillswap.routers.messages.MessageStateService"
        ) as mock_service_class:
            mock_service = MagicMock()
            mock_service.archive = AsyncMock(side_effect=NotFoundError("missing"))
            mock_service_class.return_value = mock_service

            response = api_client.post(f"/api/messages/{uuid4()}/archive")

        assert response.status_code == 404

    def test_get_message(self, api_client: TestClient) -> None:
        message = sample_message()

        with patch("skillswap.routers.messages.MailboxService") as mock_service_class:
            mock_service = MagicMock()
            mock_service.get_message = AsyncMock(return_value=message)
            mock_service_class.return_value = mock_service

            response = api_client.get(f"/api/messages/{message.id}")

        assert response.status_code == 200
        assert response.json()["content"] == "Test message"

    def test_invalid_message_id(self, api_client: TestClient) -> None:
        response = api_client.post("/api/messages/not-a-uuid/read")
        assert response.status_code == 422

    def test_wrong_http_method(self, api_client: TestClient) -> None:
        response = api_client.get(f"/api/messages/{uuid4()}/read")
        assert response.status_code == 405
