from typing import List, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import get_db
from skillswap.exceptions import MessagingError
from skillswap.models.api.messages import (
    MessageResponse,
    MessageType,
    UnreadCountResponse,
)
from skillswap.routers.errors import to_http_exception
from skillswap.services.mailbox_service import MailboxService

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.get("/{user_id}/inbox", response_model=List[MessageResponse])
async def get_inbox(
    user_id: UUID,
    limit: int = Query(
        20, description="Maximum number of messages to return", ge=1, le=1000
    ),
    skip: int = Query(0, description="Number of messages to skip", ge=0),
    unread_only: bool = Query(False, description="Only return unread messages"),
    message_type: Optional[MessageType] = Query(
        None, alias="type", description="Filter by message type"
    ),
    include_archived: bool = Query(True, description="Include archived messages"),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """
    List messages received by a user, newest first.

    Query parameters:
    - limit: Maximum number of messages to return (default: 20, max: 1000)
    - skip: Number of messages to skip (default: 0)
    - unread_only: Only unread messages (default: false)
    - type: Filter by message type ('direct', 'system', 'support', 'notification')
    - include_archived: Include archived messages (default: true)
    """
    try:
        service = MailboxService(db)
        return await service.get_inbox(
            user_id,
            limit=limit,
            skip=skip,
            unread_only=unread_only,
            message_type=message_type,
            include_archived=include_archived,
        )
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("get_inbox_failed", user_id=str(user_id))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{user_id}/inbox/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_id: UUID,
    include_archived: bool = Query(True, description="Count archived messages"),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    """Count unread messages in a user's inbox."""
    try:
        service = MailboxService(db)
        count = await service.count_unread(user_id, include_archived=include_archived)
        return UnreadCountResponse(user_id=user_id, unread_count=count)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("unread_count_failed", user_id=str(user_id))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{user_id}/sent", response_model=List[MessageResponse])
async def get_sent_messages(
    user_id: UUID,
    limit: int = Query(
        20, description="Maximum number of messages to return", ge=1, le=1000
    ),
    skip: int = Query(0, description="Number of messages to skip", ge=0),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """List messages sent by a user, newest first."""
    try:
        service = MailboxService(db)
        return await service.get_sent_messages(user_id, limit=limit, skip=skip)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("get_sent_failed", user_id=str(user_id))
        raise HTTPException(status_code=500, detail="Internal server error")
