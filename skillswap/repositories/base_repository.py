from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Generic, Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.database import Base
from skillswap.exceptions import StoreUnavailableError

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)

Clock = Callable[[], datetime]

logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic base repository with common persistence operations."""

    def __init__(
        self, db: AsyncSession, model_class: Any, clock: Optional[Clock] = None
    ):
        self.db = db
        self.model_class = model_class
        self.clock = clock or utcnow

    @asynccontextmanager
    async def _store_operation(self, action: str) -> AsyncIterator[None]:
        """Roll back and translate driver errors into StoreUnavailableError."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "store_operation_failed",
                action=action,
                table=self.model_class.__tablename__,
                error=str(e),
            )
            raise StoreUnavailableError(
                f"Message store unavailable during {action}"
            ) from e

    async def get_by_id(self, id: UUID) -> Optional[PydanticType]:
        """Get a single record by ID."""
        query = (
            select(self.model_class)
            .where(self.model_class.id == id)
            .execution_options(populate_existing=True)
        )  # type: ignore
        async with self._store_operation("get_by_id"):
            result = await self.db.execute(query)
            db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def create(self, pydantic_model: PydanticType) -> PydanticType:
        """Create a new record."""
        db_model = self._from_pydantic(pydantic_model)
        async with self._store_operation("create"):
            self.db.add(db_model)
            await self.db.commit()
            await self.db.refresh(db_model)
        return self._to_pydantic(db_model)

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError

    def _from_pydantic(self, pydantic_model: PydanticType) -> ModelType:
        """Convert Pydantic model to SQLAlchemy model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError
