"""
Async database connection management using SQLAlchemy 2.0.

PostgreSQL (asyncpg) in deployed environments, SQLite (aiosqlite) for local
runs and tests.

Note: Uses per-event-loop engine management so the same manager works from
the server loop and from per-test loops.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from listing_api.core.config import settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages async database engines and sessions.

    Implements singleton pattern with per-event-loop resource management.
    """

    _instance: Optional["DatabaseManager"] = None
    _initialized: bool = False
    _shutdown: bool = False

    # Per-loop resources: maps loop_id -> resource
    _engines: Dict[int, AsyncEngine] = {}
    _session_factories: Dict[int, async_sessionmaker] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True

    def _get_loop_id(self) -> int:
        """Get current event loop ID for per-loop resource tracking."""
        try:
            loop = asyncio.get_running_loop()
            return id(loop)
        except RuntimeError:
            return 0

    def _setup_engine_for_loop(self, loop_id: int):
        """Initialize engine and session factory for the current event loop."""
        if self._shutdown:
            logger.debug(
                f"Skipping engine setup for loop {loop_id} - shutdown in progress"
            )
            return

        if loop_id in self._engines:
            return

        engine = self._create_engine()
        self._engines[loop_id] = engine
        self._session_factories[loop_id] = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            f"Database engine initialized for loop {loop_id}: "
            f"dialect={engine.dialect.name}, pool_size={settings.DB_POOL_SIZE}"
        )

    def _create_engine(self) -> AsyncEngine:
        """Create engine from the configured connection URL."""
        database_url = settings.database_url

        # SQLite has no server to pool connections against
        if database_url.startswith("sqlite"):
            logger.info("Creating SQLite database connection")
            return create_async_engine(
                database_url,
                poolclass=NullPool,
                echo=settings.DB_ECHO,
            )

        # Log connection info without password - NEVER log credentials
        logger.info(
            "Creating direct database connection",
            extra={
                "host": settings.DATABASE_HOST,
                "port": settings.DATABASE_PORT,
                "database": settings.DATABASE_NAME,
                "user": settings.DATABASE_USER,
            },
        )
        return create_async_engine(
            database_url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=settings.DB_ECHO,
        )

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine for the current event loop."""
        loop_id = self._get_loop_id()
        if loop_id not in self._engines:
            raise RuntimeError(
                "Engine not initialized for this event loop. "
                "Use 'async with db.session()' or 'await db.get_engine_async()' first."
            )
        return self._engines[loop_id]

    async def get_engine_async(self) -> Optional[AsyncEngine]:
        """Get the async engine, initializing for the current event loop if necessary."""
        loop_id = self._get_loop_id()
        if loop_id not in self._engines:
            self._setup_engine_for_loop(loop_id)
        return self._engines.get(loop_id)

    async def test_connection(self, timeout: float = 15.0) -> bool:
        """Test database connectivity with timeout."""
        engine = await self.get_engine_async()
        if not engine:
            logger.warning("No database engine available")
            return False

        try:
            async with asyncio.timeout(timeout):
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            logger.info("Database connection test successful")
            return True
        except asyncio.TimeoutError:
            logger.error(f"Database connection test timed out after {timeout}s")
            return False
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def get_pool_stats(self) -> Dict[str, Any]:
        """Report pool usage for the current event loop's engine."""
        engine = self._engines.get(self._get_loop_id())
        if engine is None:
            return {"initialized": False}

        pool = engine.pool
        if isinstance(pool, NullPool):
            return {"initialized": True, "pool": "null"}

        return {
            "initialized": True,
            "pool": type(pool).__name__,
            "size": pool.size(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async session with automatic commit/rollback.

        Usage:
            async with db.session() as session:
                result = await session.execute(...)
        """
        loop_id = self._get_loop_id()
        if loop_id not in self._session_factories:
            self._setup_engine_for_loop(loop_id)

        if loop_id not in self._session_factories:
            raise RuntimeError("Failed to initialize database session factory")

        session = self._session_factories[loop_id]()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self):
        """Create all tables (for development/testing)."""
        from listing_api.models import Base

        engine = await self.get_engine_async()
        if engine:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self):
        """Drop all tables (for testing only)."""
        from listing_api.models import Base

        engine = await self.get_engine_async()
        if engine:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
            logger.info("Database tables dropped")

    async def close(self):
        """Dispose the engine for the CURRENT event loop only."""
        loop_id = self._get_loop_id()

        if loop_id in self._engines:
            try:
                await self._engines[loop_id].dispose()
            except Exception as e:
                logger.debug(f"Error disposing engine for loop {loop_id}: {e}")
            finally:
                del self._engines[loop_id]

        if loop_id in self._session_factories:
            del self._session_factories[loop_id]

        logger.info("Database connections closed for current loop")

    async def close_all(self):
        """Dispose engines across ALL event loops."""
        self._shutdown = True

        current_loop_id = self._get_loop_id()
        if current_loop_id in self._engines:
            try:
                await self._engines[current_loop_id].dispose()
            except Exception as e:
                logger.debug(f"Error disposing engine: {e}")

        self._engines.clear()
        self._session_factories.clear()

        logger.info("All database connections closed")


# Global database manager instance
db = DatabaseManager()

