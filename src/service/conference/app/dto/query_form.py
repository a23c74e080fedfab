"""
Query forms for queryConferences / querySessions

A form is a list of (field, operator, value) triples expressed with public
field names. `to_filters` maps them onto entity attributes and coerces values
so the store compares like with like.
"""

from enum import StrEnum
from typing import Any, Callable, Dict, List, Tuple

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.conference.app.dto.entity_filter import Filter, Operator


class QueryOperator(StrEnum):
    EQ = 'EQ'
    LT = 'LT'
    GT = 'GT'
    LTEQ = 'LTEQ'
    GTEQ = 'GTEQ'
    NE = 'NE'


OPERATORS: Dict[QueryOperator, Operator] = {
    QueryOperator.EQ: Operator.EQ,
    QueryOperator.LT: Operator.LT,
    QueryOperator.GT: Operator.GT,
    QueryOperator.LTEQ: Operator.LTEQ,
    QueryOperator.GTEQ: Operator.GTEQ,
    QueryOperator.NE: Operator.NE,
}


class ConferenceQueryField(StrEnum):
    CITY = 'CITY'
    TOPIC = 'TOPIC'
    MONTH = 'MONTH'
    MAX_ATTENDEES = 'MAX_ATTENDEES'


class SessionQueryField(StrEnum):
    NAME = 'NAME'
    SPEAKER = 'SPEAKER'
    TYPE_OF_SESSION = 'TYPE_OF_SESSION'
    START_TIME = 'START_TIME'
    DURATION = 'DURATION'


def _as_int(field: str) -> Callable[[Any], int]:
    def convert(value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise DomainError(f'{field} expects an integer, got: {value!r}')

    return convert


# public field -> (entity attribute, value coercion)
CONFERENCE_FIELDS: Dict[ConferenceQueryField, Tuple[str, Callable[[Any], Any]]] = {
    ConferenceQueryField.CITY: ('city', str),
    ConferenceQueryField.TOPIC: ('topics', str),
    ConferenceQueryField.MONTH: ('month', _as_int('MONTH')),
    ConferenceQueryField.MAX_ATTENDEES: ('max_attendees', _as_int('MAX_ATTENDEES')),
}

SESSION_FIELDS: Dict[SessionQueryField, Tuple[str, Callable[[Any], Any]]] = {
    SessionQueryField.NAME: ('name', str),
    SessionQueryField.SPEAKER: ('speaker', str),
    SessionQueryField.TYPE_OF_SESSION: ('type_of_session', str),
    SessionQueryField.START_TIME: ('start_time', _as_int('START_TIME')),
    SessionQueryField.DURATION: ('duration', _as_int('DURATION')),
}


@attrs.frozen
class ConferenceQueryFilter:
    field: ConferenceQueryField
    operator: QueryOperator
    value: Any


@attrs.frozen
class SessionQueryFilter:
    field: SessionQueryField
    operator: QueryOperator
    value: Any


@attrs.define
class ConferenceQueryForm:
    filters: List[ConferenceQueryFilter] = attrs.field(factory=list)

    def to_filters(self) -> List[Filter]:
        result = []
        for f in self.filters:
            attribute, convert = CONFERENCE_FIELDS[f.field]
            result.append(Filter(attribute, OPERATORS[f.operator], convert(f.value)))
        return result


@attrs.define
class SessionQueryForm:
    filters: List[SessionQueryFilter] = attrs.field(factory=list)

    def to_filters(self) -> List[Filter]:
        result = []
        for f in self.filters:
            attribute, convert = SESSION_FIELDS[f.field]
            result.append(Filter(attribute, OPERATORS[f.operator], convert(f.value)))
        return result
