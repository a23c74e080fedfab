"""
Production FastAPI Application

Conference Central API: profiles, conferences, sessions, wishlists and announcements.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.state.kvrocks_client import kvrocks_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Conference Central] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Conference Central] Dependency injection wired')

    # Initialize Kvrocks connection pool (fail-fast)
    if settings.CACHE_BACKEND == 'kvrocks':
        await kvrocks_client.initialize()
        Logger.base.info('📡 [Conference Central] Kvrocks initialized')

    if settings.STORE_BACKEND == 'sqlalchemy':
        await container.database().create_tables()
        Logger.base.info('🗄️  [Conference Central] Database tables ensured')

    Logger.base.info('✅ [Conference Central] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Conference Central] Shutting down...')

    if settings.CACHE_BACKEND == 'kvrocks':
        await kvrocks_client.disconnect()
        Logger.base.info('📡 [Conference Central] Kvrocks disconnected')

    if settings.STORE_BACKEND == 'sqlalchemy':
        await container.database().dispose()
        Logger.base.info('🗄️  [Conference Central] Database engine disposed')

    container.unwire()

    Logger.base.info('👋 [Conference Central] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
