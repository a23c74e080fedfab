from typing import List, Optional, Self, Sequence, Set

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.conference_metrics import metrics
from src.service.conference.app.dto.entity_filter import Filter, Operator
from src.service.conference.app.interface.i_entity_store import Entity, IEntityStore
from src.service.conference.domain.value_object.entity_key import EntityKey


class QueryComposer:
    """
    Runs multi-predicate queries on a store that allows one range field per query.

    Plan:
    1. Primary query (set A): every '=' filter plus the range filters of the
       first range field
    2. Each further range field: its own native query, intersected with A
    3. Each '!=' filter: a native '=' query whose result is subtracted from A

    Membership is by entity key. The result keeps A's order, which is the
    requested `order_by` when one is given.
    """

    def __init__(self, *, entity_store: IEntityStore) -> None:
        self.entity_store = entity_store

    @classmethod
    @inject
    def depends(
        cls,
        entity_store: IEntityStore = Depends(Provide[Container.entity_store]),
    ) -> Self:
        return cls(entity_store=entity_store)

    @Logger.io
    async def compose(
        self,
        kind: str,
        filters: Sequence[Filter] = (),
        *,
        ancestor: Optional[EntityKey] = None,
        order_by: Sequence[str] = (),
    ) -> List[Entity]:
        equalities = [f for f in filters if f.operator is Operator.EQ]
        ranges = [f for f in filters if f.operator.is_range]
        not_equals = [f for f in filters if f.operator is Operator.NE]

        range_fields: List[str] = []
        for f in ranges:
            if f.field not in range_fields:
                range_fields.append(f.field)

        primary = equalities + [f for f in ranges if range_fields and f.field == range_fields[0]]
        metrics.record_composed_query(kind=kind, stage='primary')
        result = await self.entity_store.query(
            kind, ancestor=ancestor, filters=primary, order_by=order_by
        )

        for field in range_fields[1:]:
            metrics.record_composed_query(kind=kind, stage='intersect')
            keys = await self._keys(kind, ancestor, [f for f in ranges if f.field == field])
            result = [e for e in result if e.key in keys]

        for f in not_equals:
            metrics.record_composed_query(kind=kind, stage='subtract')
            keys = await self._keys(kind, ancestor, [Filter(f.field, Operator.EQ, f.value)])
            result = [e for e in result if e.key not in keys]

        return result

    async def _keys(
        self, kind: str, ancestor: Optional[EntityKey], filters: List[Filter]
    ) -> Set[EntityKey]:
        found = await self.entity_store.query(kind, ancestor=ancestor, filters=filters)
        return {e.key for e in found}
