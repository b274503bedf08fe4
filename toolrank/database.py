"""Database connection and session management."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from toolrank.config import get_settings
from toolrank.exceptions import StorageUnavailableError
from toolrank.utils.logger import get_logger

log = get_logger(__name__)


# Base class for all models
class Base(DeclarativeBase):
    pass


# Create async engine
settings = get_settings()
engine = create_async_engine(
    settings.postgres_url,
    echo=settings.sql_echo,
    future=True,
    pool_pre_ping=True,
    pool_recycle=1800,
)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def is_transient_error(exc: Exception) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError, OSError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@asynccontextmanager
async def storage_errors() -> AsyncIterator[None]:
    """Re-raise connection-level database failures as StorageUnavailableError.

    Constraint violations and other database errors propagate unchanged.
    """
    try:
        yield
    except Exception as e:
        if not is_transient_error(e):
            raise
        log.error("storage unavailable", error_type=type(e).__name__, error=str(e))
        raise StorageUnavailableError() from e
