from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.conference.app.command.set_announcement_use_case import SetAnnouncementUseCase
from src.service.conference.app.query.announcement_feed import AnnouncementFeed
from src.service.conference.driving_adapter.http_controller.schema.announcement_schema import (
    AnnouncementResponse,
)


router = APIRouter()
task_router = APIRouter()


@router.get('/announcement', status_code=status.HTTP_200_OK)
@Logger.io
async def get_announcement(
    feed: AnnouncementFeed = Depends(AnnouncementFeed.depends),
) -> Optional[AnnouncementResponse]:
    text = await feed.get_announcement()
    return AnnouncementResponse(data=text) if text is not None else None


@router.get('/getFeaturedSpeaker', status_code=status.HTTP_200_OK)
@Logger.io
async def get_featured_speaker(
    feed: AnnouncementFeed = Depends(AnnouncementFeed.depends),
) -> Optional[AnnouncementResponse]:
    text = await feed.get_featured_speaker()
    return AnnouncementResponse(data=text) if text is not None else None


# ============================ Maintenance Tasks ============================


@task_router.get('/set_announcement', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def set_announcement(
    use_case: SetAnnouncementUseCase = Depends(SetAnnouncementUseCase.depends),
) -> None:
    """Refresh the nearly-sold-out announcement; called by a scheduler."""
    await use_case.execute()
