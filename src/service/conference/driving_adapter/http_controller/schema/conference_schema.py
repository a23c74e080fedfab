from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.conference.app.dto.query_form import (
    ConferenceQueryField,
    ConferenceQueryFilter,
    ConferenceQueryForm,
    QueryOperator,
)
from src.service.conference.app.dto.transaction_outcome import TransactionOutcome
from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.value_object.conference_form import ConferenceForm


class ConferenceCreateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    topics: List[str] = []
    city: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    max_attendees: int = 0

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'name': 'PyCon Taipei',
                'description': 'Annual Python conference',
                'topics': ['Python', 'Web'],
                'city': 'Taipei',
                'start_date': '2026-09-01T00:00:00',
                'end_date': '2026-09-03T00:00:00',
                'max_attendees': 500,
            }
        }
    )

    def to_form(self) -> ConferenceForm:
        return ConferenceForm(
            name=self.name,
            description=self.description,
            topics=list(self.topics),
            city=self.city,
            start_date=self.start_date,
            end_date=self.end_date,
            max_attendees=self.max_attendees,
        )


class ConferenceResponse(BaseModel):
    websafe_key: str
    id: int
    name: str
    description: Optional[str]
    organizer_user_id: str
    organizer_display_name: Optional[str]
    topics: List[str]
    city: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    month: int
    max_attendees: int
    seats_available: int

    @classmethod
    def from_entity(cls, conference: Conference) -> 'ConferenceResponse':
        return cls(
            websafe_key=conference.websafe_key,
            id=conference.id,
            name=conference.name,
            description=conference.description,
            organizer_user_id=conference.organizer_user_id,
            organizer_display_name=conference.organizer_display_name,
            topics=list(conference.topics),
            city=conference.city,
            start_date=conference.start_date,
            end_date=conference.end_date,
            month=conference.month,
            max_attendees=conference.max_attendees,
            seats_available=conference.seats_available,
        )


class ConferenceQueryFilterRequest(BaseModel):
    field: ConferenceQueryField
    operator: QueryOperator
    value: Any


class ConferenceQueryRequest(BaseModel):
    filters: List[ConferenceQueryFilterRequest] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'filters': [
                    {'field': 'CITY', 'operator': 'EQ', 'value': 'London'},
                    {'field': 'MAX_ATTENDEES', 'operator': 'GT', 'value': 10},
                ]
            }
        }
    )

    def to_form(self) -> ConferenceQueryForm:
        return ConferenceQueryForm(
            filters=[ConferenceQueryFilter(f.field, f.operator, f.value) for f in self.filters]
        )


class WrappedBooleanResponse(BaseModel):
    result: bool
    reason: str = ''

    @classmethod
    def from_outcome(cls, outcome: TransactionOutcome) -> 'WrappedBooleanResponse':
        return cls(result=outcome.success, reason=outcome.detail)
