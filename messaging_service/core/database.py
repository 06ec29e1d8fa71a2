"""
Database configuration and connection management for the messaging service.
Implements async SQLAlchemy with connection pooling for server databases.
"""
from typing import Any, AsyncGenerator, Dict
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
import structlog

from .config import settings
from ..models.base import Base

logger = structlog.get_logger()


def _engine_options() -> Dict[str, Any]:
    """Pool options only apply to server databases; SQLite uses its default pool."""
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
        "pool_pre_ping": True,  # Validate connections before use
        "pool_recycle": settings.DATABASE_POOL_RECYCLE,
    }


# Create async engine
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options()
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency that provides a request-scoped async session.
    Commits on success and rolls back if the request raised.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.warning("Database session rolled back", error=str(e))
            raise


async def init_models() -> None:
    """Create tables that do not exist yet. Used outside production."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


class DatabaseHealthCheck:
    """Health check utilities for database connections."""

    @staticmethod
    async def check_connection() -> bool:
        """Check if database connection is healthy."""
        try:
            async with AsyncSessionLocal() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


async def close_db_connections():
    """Close all database connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
