"""
Native store predicates and their in-process evaluation.

Both store adapters share these rules so they accept and reject exactly the
same queries:
- equality filters combine freely
- range operators (< <= > >=) may target a single field per query
- '!=' is not native; callers must compose it (see QueryComposer)
- equality against a list attribute matches any element
"""

from enum import StrEnum
from typing import Any, Iterable, List, Sequence, TypeVar

import attrs

from src.platform.exception.exceptions import UnsupportedQueryError


class Operator(StrEnum):
    EQ = '='
    LT = '<'
    LTEQ = '<='
    GT = '>'
    GTEQ = '>='
    NE = '!='

    @property
    def is_range(self) -> bool:
        return self in (Operator.LT, Operator.LTEQ, Operator.GT, Operator.GTEQ)


@attrs.frozen
class Filter:
    field: str
    operator: Operator
    value: Any


def validate_native_filters(filters: Sequence[Filter]) -> None:
    range_fields = {f.field for f in filters if f.operator.is_range}
    if len(range_fields) > 1:
        raise UnsupportedQueryError(
            f'Inequality filters are limited to one field per query, got: {sorted(range_fields)}'
        )
    if any(f.operator is Operator.NE for f in filters):
        raise UnsupportedQueryError('Not-equal filters must be composed, not sent to the store')


def _compare(actual: Any, operator: Operator, expected: Any) -> bool:
    if operator is Operator.EQ:
        return actual == expected
    if actual is None or expected is None:
        return False
    try:
        if operator is Operator.LT:
            return actual < expected
        if operator is Operator.LTEQ:
            return actual <= expected
        if operator is Operator.GT:
            return actual > expected
        if operator is Operator.GTEQ:
            return actual >= expected
    except TypeError:
        return False
    return actual != expected


def matches(entity: Any, filter_: Filter) -> bool:
    actual = getattr(entity, filter_.field, None)
    if isinstance(actual, list):
        return any(_compare(item, filter_.operator, filter_.value) for item in actual)
    return _compare(actual, filter_.operator, filter_.value)


def matches_all(entity: Any, filters: Iterable[Filter]) -> bool:
    return all(matches(entity, f) for f in filters)


_E = TypeVar('_E')


def sort_entities(entities: Iterable[_E], order_by: Sequence[str]) -> List[_E]:
    """
    Stable multi-key sort. '-field' sorts descending.

    Absent values sort before present ones in ascending order.
    """
    result = list(entities)
    # Apply keys last-to-first so the first key dominates
    for ordering in reversed(order_by):
        field = ordering.lstrip('-')
        result.sort(key=lambda e: _sort_key(e, field), reverse=ordering.startswith('-'))
    return result


def _sort_key(entity: Any, field: str) -> tuple[bool, Any]:
    value = getattr(entity, field, None)
    return (False, 0) if value is None else (True, value)
