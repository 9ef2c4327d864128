import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import DataError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import Config
from app.errors import ErrorType, ValidationKind
from app.exceptions import AppException

logger = logging.getLogger(__name__)


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def new_id() -> str:
    """Generate an opaque entity id."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Current UTC time, naive, so values compare equal after a round trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_async_url(url: str, db_type: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    db_type = db_type.lower()
    if db_type == "postgresql":
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif db_type == "mysql":
        return url.replace("mysql://", "mysql+aiomysql://")
    elif db_type == "sqlite":
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


# Driver-level failures that mean the store cannot be reached
STORE_ERRORS = (OperationalError, InterfaceError, OSError)


class Database:
    """Explicit store handle passed to every service.

    Works with any SQLAlchemy-supported async database.
    """

    def __init__(self, url: str | None = None, db_type: str | None = None):
        self.url = url or Config.DATABASE_URL
        self.db_type = db_type or Config.DATABASE_TYPE
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self):
        """Create database engine and session factory."""
        async_url = get_async_url(self.url, self.db_type)
        kwargs = {"echo": False}
        if ":memory:" in async_url:
            # One shared connection, otherwise each session sees an empty database
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        self.engine = create_async_engine(async_url, **kwargs)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(f"Database engine created ({self.db_type})")

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database engine disposed")

    async def create_all(self):
        """Create tables for all registered models."""
        import app.models  # noqa: F401  registers tables on Base.metadata

        if not self.engine:
            await self.connect()
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except STORE_ERRORS as e:
            logger.error(f"Store unavailable: {e}")
            raise AppException(ErrorType.STORE_UNAVAILABLE, "Database is unavailable") from e

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; driver failures surface as STORE_UNAVAILABLE.

        Values a column can't hold surface as VALIDATION_ERROR (OutOfRange).
        """
        if not self.engine:
            await self.connect()
        try:
            async with self.session_factory() as session:
                yield session
        except DataError as e:
            logger.warning(f"Rejected by store: {e.orig}")
            raise AppException(
                ErrorType.VALIDATION_ERROR,
                "Value out of range for storage",
                ValidationKind.OUT_OF_RANGE,
            ) from e
        except STORE_ERRORS as e:
            logger.error(f"Store unavailable: {e}")
            raise AppException(ErrorType.STORE_UNAVAILABLE, "Database is unavailable") from e

    async def is_reachable(self) -> bool:
        """Liveness predicate for health checks. Never raises."""
        try:
            if not self.engine:
                await self.connect()
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database not reachable: {e}")
            return False
