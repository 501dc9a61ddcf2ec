import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import get_db
from skillswap.exceptions import MessagingError
from skillswap.models.api.messages import MessageResponse
from skillswap.models.api.system_messages import SwapEventRequest, SystemMessageRequest
from skillswap.routers.errors import to_http_exception
from skillswap.services.system_message_service import SystemMessageService

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.post("", response_model=MessageResponse, status_code=201)
async def create_system_message(
    request: SystemMessageRequest, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Create a system message for a user."""
    try:
        service = SystemMessageService(db)
        return await service.create_system_message(
            request.recipient_id,
            request.content,
            subject=request.subject,
            priority=request.priority,
            related_swap_request_id=request.related_swap_request_id,
            metadata=request.metadata,
        )
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("create_system_message_failed")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/swap-events", response_model=MessageResponse, status_code=201)
async def notify_swap_event(
    request: SwapEventRequest, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """
    Notify a user about a swap-request lifecycle event.

    Called by the swap workflow once per notifiable transition.
    """
    try:
        service = SystemMessageService(db)
        return await service.notify_swap_event(
            request.event,
            request.recipient_id,
            request.swap_request_id,
            actor_name=request.actor_name,
            skill_offered=request.skill_offered,
            skill_wanted=request.skill_wanted,
        )
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("notify_swap_event_failed", event=request.event.value)
        raise HTTPException(status_code=500, detail="Internal server error")
