from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.conference.app.dto.entity_filter import Filter, Operator
from src.service.conference.app.interface.i_cache import ICache
from src.service.conference.app.interface.i_entity_store import IEntityStore
from src.service.conference.app.query.announcement_feed import AnnouncementFeed
from src.service.conference.domain.entity.conference_entity import Conference


ANNOUNCEMENT_PREFIX = 'Last chance to attend! The following conferences are nearly sold out: '


class SetAnnouncementUseCase:
    """
    Background job: announce conferences that are nearly sold out.

    Picks conferences with 0 < seats_available <= threshold. Nothing is
    written when none qualify, so the previous announcement stays.
    """

    def __init__(
        self,
        *,
        entity_store: IEntityStore,
        cache: ICache,
        threshold: int = settings.NEARLY_SOLD_OUT_THRESHOLD,
    ) -> None:
        self.entity_store = entity_store
        self.announcement_feed = AnnouncementFeed(cache=cache)
        self.threshold = threshold

    @classmethod
    @inject
    def depends(
        cls,
        entity_store: IEntityStore = Depends(Provide[Container.entity_store]),
        cache: ICache = Depends(Provide[Container.cache]),
    ) -> Self:
        return cls(entity_store=entity_store, cache=cache)

    @Logger.io
    async def execute(self) -> Optional[str]:
        conferences = await self.entity_store.query(
            Conference.KIND,
            filters=[Filter('seats_available', Operator.LTEQ, self.threshold)],
        )
        names = [
            c.name for c in conferences if isinstance(c, Conference) and c.seats_available > 0
        ]
        if not names:
            Logger.base.info('📢 [ANNOUNCEMENT] No nearly sold-out conferences')
            return None

        announcement = ANNOUNCEMENT_PREFIX + ', '.join(names)
        await self.announcement_feed.set_announcement(announcement)
        Logger.base.info(f'📢 [ANNOUNCEMENT] {announcement}')
        return announcement
