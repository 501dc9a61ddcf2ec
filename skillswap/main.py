from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

import structlog
from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.config import APP_ADDR, APP_PORT, COMMIT_HASH, ENV
from skillswap.database import close_db, get_db, init_db
from skillswap.log_config import configure_logging
from skillswap.routers.conversations import router as conversations_router
from skillswap.routers.messages import router as messages_router
from skillswap.routers.system_messages import router as system_messages_router
from skillswap.routers.users import router as users_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown."""
    # Startup
    configure_logging()
    await init_db()
    logger.info("startup", environment=ENV, version=COMMIT_HASH)
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title="SkillSwap Messaging Service",
    description="Mailbox, conversations and system notifications for SkillSwap",
    version=COMMIT_HASH or "dev",
    lifespan=lifespan,
)

# Include routers
app.include_router(messages_router, prefix="/api/messages", tags=["messages"])
app.include_router(users_router, prefix="/api/users", tags=["mailbox"])
app.include_router(
    conversations_router, prefix="/api/conversations", tags=["conversations"]
)
app.include_router(
    system_messages_router, prefix="/api/system-messages", tags=["system-messages"]
)


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Optional[str]]:
    """Health check endpoint with database connectivity."""
    try:
        # Test database connection
        result = await db.execute(text("SELECT 1"))
        db_status = "connected" if result.scalar() == 1 else "error"
    except Exception as e:
        logger.warning("health_check_database_unreachable", error=str(e))
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": ENV,
        "version": COMMIT_HASH,
    }


# If run directly, start the server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=APP_ADDR, port=APP_PORT)
