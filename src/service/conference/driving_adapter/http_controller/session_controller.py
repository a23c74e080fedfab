from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.conference.app.command.session_catalog import SessionCatalog
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.driving_adapter.http_controller.auth.current_identity import (
    get_optional_identity,
)
from src.service.conference.driving_adapter.http_controller.schema.conference_schema import (
    WrappedBooleanResponse,
)
from src.service.conference.driving_adapter.http_controller.schema.session_schema import (
    SessionCreateRequest,
    SessionQueryRequest,
    SessionResponse,
)


router = APIRouter()


@router.post('/conference/{websafe_conference_key}/session', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_session(
    websafe_conference_key: str,
    request: SessionCreateRequest,
    identity: Optional[Identity] = Depends(get_optional_identity),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> SessionResponse:
    session = await catalog.create(
        identity, EntityKey.from_websafe(websafe_conference_key), request.to_form()
    )
    return SessionResponse.from_entity(session)


@router.post('/getConferenceSessions', status_code=status.HTTP_200_OK)
@Logger.io
async def get_conference_sessions(
    websafe_conference_key: str = Query(alias='websafeConferenceKey'),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    sessions = await catalog.list_by_conference(EntityKey.from_websafe(websafe_conference_key))
    return [SessionResponse.from_entity(s) for s in sessions]


@router.post('/getConferenceSessionsByType', status_code=status.HTTP_200_OK)
@Logger.io
async def get_conference_sessions_by_type(
    websafe_conference_key: str = Query(alias='websafeConferenceKey'),
    type_of_session: str = Query(alias='typeOfSession'),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    sessions = await catalog.list_by_conference_and_type(
        EntityKey.from_websafe(websafe_conference_key), type_of_session
    )
    return [SessionResponse.from_entity(s) for s in sessions]


@router.post('/getSessionsBySpeaker', status_code=status.HTTP_200_OK)
@Logger.io
async def get_sessions_by_speaker(
    speaker: str,
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    sessions = await catalog.list_by_speaker(speaker)
    return [SessionResponse.from_entity(s) for s in sessions]


@router.post('/session/{websafe_session_key}/wishlist', status_code=status.HTTP_200_OK)
@Logger.io
async def add_session_to_wishlist(
    websafe_session_key: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> WrappedBooleanResponse:
    outcome = await catalog.add_to_wishlist(identity, EntityKey.from_websafe(websafe_session_key))
    return WrappedBooleanResponse.from_outcome(outcome)


@router.delete('/session/{websafe_session_key}/wishlist', status_code=status.HTTP_200_OK)
@Logger.io
async def remove_session_from_wishlist(
    websafe_session_key: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> WrappedBooleanResponse:
    outcome = await catalog.remove_from_wishlist(
        identity, EntityKey.from_websafe(websafe_session_key)
    )
    return WrappedBooleanResponse.from_outcome(outcome)


@router.get('/getSessionsInWishlist', status_code=status.HTTP_200_OK)
@Logger.io
async def get_sessions_in_wishlist(
    identity: Optional[Identity] = Depends(get_optional_identity),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    sessions = await catalog.list_wishlist(identity)
    return [SessionResponse.from_entity(s) for s in sessions]


@router.post('/querySessions', status_code=status.HTTP_200_OK)
@Logger.io
async def query_sessions(
    request: SessionQueryRequest,
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    sessions = await catalog.query(request.to_form())
    return [SessionResponse.from_entity(s) for s in sessions]


@router.get('/queryProblem', status_code=status.HTTP_200_OK)
@Logger.io
async def query_problem(
    start_time: int = Query(alias='startTime'),
    type_of_session: str = Query(alias='typeOfSession'),
    catalog: SessionCatalog = Depends(SessionCatalog.depends),
) -> List[SessionResponse]:
    """Sessions before `startTime` that are not of `typeOfSession`."""
    sessions = await catalog.query_problem(start_time, type_of_session)
    return [SessionResponse.from_entity(s) for s in sessions]
