"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: creates the engine lazily and rebinds it when the event loop changes
2. Base: declarative base shared by every ORM model
3. Database: the object handed to stores through dependency injection

In-memory SQLite URLs get a StaticPool so that every session sees the same
database. File-backed SQLite keeps the default pool.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class AsyncEngineManager:
    """
    Owns one AsyncEngine per event loop.

    Engines hold connections bound to the loop that opened them; reusing one
    from another loop raises "attached to a different loop" errors.
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, rebuilding engine')
            Logger.base.info(f'🔗 [DB] Creating engine for {self._safe_url()}')
            self._engine = self._create_engine()
            self._session_maker = None
            self._loop = current_loop

        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            self._loop = None

    def _create_engine(self) -> AsyncEngine:
        if self._is_in_memory_sqlite():
            return create_async_engine(
                self._url,
                echo=settings.DB_ECHO,
                poolclass=StaticPool,
                connect_args={'check_same_thread': False},
            )
        return create_async_engine(
            self._url,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )

    def _is_in_memory_sqlite(self) -> bool:
        return self._url.startswith('sqlite') and (
            self._url.endswith('://') or ':memory:' in self._url
        )

    def _safe_url(self) -> str:
        # Hide credentials in log lines
        scheme, _, rest = self._url.partition('://')
        return f'{scheme}://{rest.rpartition("@")[2]}'


class Database:
    """Database handle for dependency injection."""

    def __init__(self, *, url: Optional[str] = None) -> None:
        self._engine_manager = AsyncEngineManager(url or settings.DATABASE_URL_ASYNC)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine_manager.get_engine()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Plain session; rolls back on exception."""
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session

    async def create_tables(self) -> None:
        """Create tables if they don't exist"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
