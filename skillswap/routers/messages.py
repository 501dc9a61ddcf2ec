from typing import Any, Dict
from uuid import UUID

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import get_db
from skillswap.exceptions import MessagingError, ValidationError
from skillswap.models.api.messages import MessageResponse
from skillswap.routers.errors import to_http_exception
from skillswap.services.mailbox_service import MailboxService
from skillswap.services.message_state_service import MessageStateService
from skillswap.services.send_message_service import SendMessageService

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    payload: Dict[str, Any] = Body(...), db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """
    Send a direct, support or notification message.

    Validation failures are reported per field with status 422.
    """
    try:
        service = SendMessageService(db)
        return await service.send_message(payload)
    except ValidationError as e:
        logger.warning("message_rejected", errors=e.errors)
        raise to_http_exception(e)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("send_message_failed")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: UUID, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Get a message with its sender, recipient and swap request resolved."""
    try:
        service = MailboxService(db)
        return await service.get_message(message_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("get_message_failed", message_id=str(message_id))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: UUID, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Mark a message as read. Repeated calls keep the original read_at."""
    try:
        service = MessageStateService(db)
        return await service.mark_as_read(message_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("mark_read_failed", message_id=str(message_id))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{message_id}/archive", response_model=MessageResponse)
async def archive_message(
    message_id: UUID, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Archive a message."""
    try:
        service = MessageStateService(db)
        return await service.archive(message_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("archive_failed", message_id=str(message_id))
        raise HTTPException(status_code=500, detail="Internal server error")
