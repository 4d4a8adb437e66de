import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from bliss_dental.config import settings
from bliss_dental.exceptions import StorageError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
    }


class Database:
    """Owns the async engine and session factory for one database URL."""

    def __init__(
        self,
        url: str,
        connect_retries: int = settings.db_connect_retries,
        retry_delay: float = settings.db_retry_delay,
    ):
        self.url = url
        self.connect_retries = connect_retries
        self.retry_delay = retry_delay
        # Set echo=False to disable SQL query logging (too verbose for development)
        self.engine = create_async_engine(
            url,
            echo=False,
            future=True,
            **_engine_options(url),
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def connect(self) -> None:
        """Create tables, retrying while the server is unreachable."""
        import bliss_dental.models  # noqa: F401  (registers tables on Base.metadata)

        for attempt in range(1, self.connect_retries + 1):
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                logger.info("Database connected")
                return
            except (OperationalError, OSError) as e:
                logger.error(f"Database connection attempt {attempt} failed: {e}")
                if attempt < self.connect_retries:
                    logger.info(f"Retrying connection in {self.retry_delay} seconds...")
                    await asyncio.sleep(self.retry_delay)

        raise StorageError("Database unavailable")

    async def is_connected(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (OperationalError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session scoped to one unit of work: commit on success, rollback on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


database = Database(settings.database_url)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency to get database session."""
    async with database.session() as session:
        yield session
