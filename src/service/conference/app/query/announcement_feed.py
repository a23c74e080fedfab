from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.conference.app.interface.i_cache import ICache


class AnnouncementFeed:
    """Reads and writes the announcement and featured-speaker cache slots."""

    def __init__(
        self,
        *,
        cache: ICache,
        announcement_key: str = settings.ANNOUNCEMENT_CACHE_KEY,
        featured_speaker_key: str = settings.FEATURED_SPEAKER_CACHE_KEY,
    ) -> None:
        self.cache = cache
        self.announcement_key = announcement_key
        self.featured_speaker_key = featured_speaker_key

    @classmethod
    @inject
    def depends(cls, cache: ICache = Depends(Provide[Container.cache])) -> Self:
        return cls(cache=cache)

    @Logger.io
    async def get_announcement(self) -> Optional[str]:
        return await self.cache.get(self.announcement_key)

    @Logger.io
    async def set_announcement(self, text: str) -> None:
        await self.cache.set(self.announcement_key, text)

    @Logger.io
    async def get_featured_speaker(self) -> Optional[str]:
        return await self.cache.get(self.featured_speaker_key)

    @Logger.io
    async def set_featured_speaker(self, text: str) -> None:
        await self.cache.set(self.featured_speaker_key, text)
