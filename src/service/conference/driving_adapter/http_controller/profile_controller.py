from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.conference.app.command.profile_service import ProfileService
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.driving_adapter.http_controller.auth.current_identity import (
    get_optional_identity,
)
from src.service.conference.driving_adapter.http_controller.schema.profile_schema import (
    ProfileFormRequest,
    ProfileResponse,
)


router = APIRouter()


@router.post('/profile', status_code=status.HTTP_200_OK)
@Logger.io
async def save_profile(
    request: ProfileFormRequest,
    identity: Optional[Identity] = Depends(get_optional_identity),
    profile_service: ProfileService = Depends(ProfileService.depends),
) -> ProfileResponse:
    profile = await profile_service.save_profile(
        identity,
        display_name=request.display_name,
        tee_shirt_size=request.tee_shirt_size,
    )
    return ProfileResponse.from_entity(profile)


@router.get('/profile', status_code=status.HTTP_200_OK)
@Logger.io
async def get_profile(
    identity: Optional[Identity] = Depends(get_optional_identity),
    profile_service: ProfileService = Depends(ProfileService.depends),
) -> Optional[ProfileResponse]:
    """The caller's stored profile, or null before the first save."""
    profile = await profile_service.get_existing(identity)
    return ProfileResponse.from_entity(profile) if profile else None
