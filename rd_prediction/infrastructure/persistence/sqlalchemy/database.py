"""
Database engine and session factory setup.

The engine and session factory are created once in the application lifespan
and stored on ``app.state``. Repositories receive the session factory and
open a short session per operation.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import rd_prediction.infrastructure.persistence.sqlalchemy.models  # noqa: F401 # register tables on Base
from rd_prediction.core.config import Settings
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import Base

logger = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine with arguments suited to the database backend."""
    url = settings.ASYNC_DATABASE_URL
    engine_args: dict = {"echo": settings.DB_ECHO_LOG}

    if url.startswith("sqlite"):
        # SQLite-specific settings (no pooling)
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        engine_args.update(
            {
                "pool_pre_ping": True,
                "pool_size": 5,
                "max_overflow": 10,
                "pool_recycle": 300,
            }
        )

    logger.info(f"Creating AsyncEngine for {url.split('://', 1)[0]}")
    return create_async_engine(url, **engine_args)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created (or verified to exist)")
