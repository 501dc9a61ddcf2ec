from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import get_db
from skillswap.exceptions import MessagingError
from skillswap.models.api.messages import MessageResponse
from skillswap.routers.errors import to_http_exception
from skillswap.services.mailbox_service import MailboxService

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.get("/{user_a}/{user_b}", response_model=List[MessageResponse])
async def get_conversation(
    user_a: UUID,
    user_b: UUID,
    limit: int = Query(
        50, description="Maximum number of messages to return", ge=1, le=1000
    ),
    skip: int = Query(0, description="Number of messages to skip", ge=0),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """
    Get the messages exchanged between two users, newest first.

    The order of the two user ids does not matter.
    """
    try:
        service = MailboxService(db)
        return await service.get_conversation(user_a, user_b, limit=limit, skip=skip)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("get_conversation_failed")
        raise HTTPException(status_code=500, detail="Internal server error")
