from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.conference.app.command.conference_registry import ConferenceRegistry
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.driving_adapter.http_controller.auth.current_identity import (
    get_optional_identity,
)
from src.service.conference.driving_adapter.http_controller.schema.conference_schema import (
    ConferenceCreateRequest,
    ConferenceQueryRequest,
    ConferenceResponse,
    WrappedBooleanResponse,
)


router = APIRouter()


@router.post('/conference', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_conference(
    request: ConferenceCreateRequest,
    identity: Optional[Identity] = Depends(get_optional_identity),
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> ConferenceResponse:
    conference = await registry.create(identity, request.to_form())
    return ConferenceResponse.from_entity(conference)


@router.post('/queryConferences', status_code=status.HTTP_200_OK)
@Logger.io
async def query_conferences(
    request: ConferenceQueryRequest,
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> List[ConferenceResponse]:
    conferences = await registry.query(request.to_form())
    return [ConferenceResponse.from_entity(c) for c in conferences]


@router.post('/getConferencesCreated', status_code=status.HTTP_200_OK)
@Logger.io
async def get_conferences_created(
    identity: Optional[Identity] = Depends(get_optional_identity),
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> List[ConferenceResponse]:
    conferences = await registry.list_created_by(identity)
    return [ConferenceResponse.from_entity(c) for c in conferences]


@router.get('/conference/{websafe_conference_key}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_conference(
    websafe_conference_key: str,
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> ConferenceResponse:
    conference = await registry.get_by_key(EntityKey.from_websafe(websafe_conference_key))
    return ConferenceResponse.from_entity(conference)


@router.post('/conference/{websafe_conference_key}/registration', status_code=status.HTTP_200_OK)
@Logger.io
async def register_for_conference(
    websafe_conference_key: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> WrappedBooleanResponse:
    outcome = await registry.register(identity, EntityKey.from_websafe(websafe_conference_key))
    return WrappedBooleanResponse.from_outcome(outcome)


@router.delete(
    '/conference/{websafe_conference_key}/registration', status_code=status.HTTP_200_OK
)
@Logger.io
async def unregister_from_conference(
    websafe_conference_key: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> WrappedBooleanResponse:
    outcome = await registry.unregister(identity, EntityKey.from_websafe(websafe_conference_key))
    return WrappedBooleanResponse.from_outcome(outcome)


@router.get('/getConferencesToAttend', status_code=status.HTTP_200_OK)
@Logger.io
async def get_conferences_to_attend(
    identity: Optional[Identity] = Depends(get_optional_identity),
    registry: ConferenceRegistry = Depends(ConferenceRegistry.depends),
) -> List[ConferenceResponse]:
    conferences = await registry.list_to_attend(identity)
    return [ConferenceResponse.from_entity(c) for c in conferences]
