from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.conference.app.dto.query_form import (
    QueryOperator,
    SessionQueryField,
    SessionQueryFilter,
    SessionQueryForm,
)
from src.service.conference.domain.entity.session_entity import Session
from src.service.conference.domain.value_object.session_form import SessionForm


class SessionCreateRequest(BaseModel):
    name: Optional[str] = None
    highlights: Optional[str] = None
    speaker: Optional[str] = None
    type_of_session: Optional[str] = None
    start_time: int = 0  # Hour of day
    date: Optional[datetime] = None
    duration: int = 0  # Minutes

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'name': 'Async Python in Production',
                'highlights': 'asyncio, trio, anyio',
                'speaker': 'Guido',
                'type_of_session': 'Keynote',
                'start_time': 9,
                'date': '2026-09-01T00:00:00',
                'duration': 45,
            }
        }
    )

    def to_form(self) -> SessionForm:
        return SessionForm(
            name=self.name,
            highlights=self.highlights,
            speaker=self.speaker,
            type_of_session=self.type_of_session,
            start_time=self.start_time,
            date=self.date,
            duration=self.duration,
        )


class SessionResponse(BaseModel):
    websafe_key: str
    id: int
    name: str
    highlights: Optional[str]
    speaker: str
    type_of_session: str
    start_time: int
    date: Optional[datetime]
    duration: int
    conference_websafe_key: str
    conference_id: int

    @classmethod
    def from_entity(cls, session: Session) -> 'SessionResponse':
        return cls(
            websafe_key=session.websafe_key,
            id=session.id,
            name=session.name,
            highlights=session.highlights,
            speaker=session.speaker,
            type_of_session=session.type_of_session,
            start_time=session.start_time,
            date=session.date,
            duration=session.duration,
            conference_websafe_key=session.conference_websafe_key,
            conference_id=session.conference_id,
        )


class SessionQueryFilterRequest(BaseModel):
    field: SessionQueryField
    operator: QueryOperator
    value: Any


class SessionQueryRequest(BaseModel):
    filters: List[SessionQueryFilterRequest] = Field(default_factory=list)

    def to_form(self) -> SessionQueryForm:
        return SessionQueryForm(
            filters=[SessionQueryFilter(f.field, f.operator, f.value) for f in self.filters]
        )
