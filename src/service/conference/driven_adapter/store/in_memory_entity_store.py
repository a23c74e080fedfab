"""
In-memory Entity Store

Versioned dict with optimistic transactions. Every stored entity carries a
version counter; a transaction records the version of everything it reads or
writes and commits only if those versions are unchanged. Commits are
serialized by an asyncio.Lock.

Entities are deep-copied on the way in and out so callers never share state
with the store.
"""

import asyncio
from copy import deepcopy
from itertools import count
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from src.platform.exception.exceptions import TransactionConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.conference_metrics import metrics
from src.service.conference.app.dto.entity_filter import (
    Filter,
    matches_all,
    sort_entities,
    validate_native_filters,
)
from src.service.conference.app.interface.i_entity_store import Entity, IEntityStore, ITransaction
from src.service.conference.driven_adapter.store.commit_callbacks import run_commit_callbacks
from src.service.conference.domain.value_object.entity_key import EntityKey


_T = TypeVar('_T')

# key -> (version, entity)
_Rows = Dict[EntityKey, Tuple[int, Entity]]


class InMemoryTransaction(ITransaction):
    def __init__(self, store: 'InMemoryEntityStore') -> None:
        self._store = store
        self._observed: Dict[EntityKey, int] = {}  # version seen; 0 means absent
        self._writes: Dict[EntityKey, Entity] = {}
        self._callbacks: List[Callable[[], Awaitable[None]]] = []

    def _observe(self, key: EntityKey) -> Optional[Entity]:
        version, entity = self._store._rows.get(key, (0, None))
        self._observed.setdefault(key, version)
        return entity

    async def get(self, key: EntityKey) -> Optional[Entity]:
        if key in self._writes:
            return deepcopy(self._writes[key])
        return deepcopy(self._observe(key))

    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        result = []
        for key in keys:
            entity = await self.get(key)
            if entity is not None:
                result.append(entity)
        return result

    def put(self, *entities: Entity) -> None:
        for entity in entities:
            self._observe(entity.key)
            self._writes[entity.key] = deepcopy(entity)

    def on_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._callbacks.append(callback)

    @property
    def callbacks(self) -> List[Callable[[], Awaitable[None]]]:
        return self._callbacks

    def conflicting_keys(self) -> List[EntityKey]:
        rows = self._store._rows
        return [
            key
            for key, version in self._observed.items()
            if rows.get(key, (0, None))[0] != version
        ]

    @property
    def writes(self) -> Dict[EntityKey, Entity]:
        return self._writes


class InMemoryEntityStore(IEntityStore):
    def __init__(self) -> None:
        self._rows: _Rows = {}
        self._ids = count(1)
        self._versions = count(1)  # global, so a re-created key never reuses a version
        self._commit_lock = asyncio.Lock()

    def _write(self, entity: Entity) -> None:
        self._rows[entity.key] = (next(self._versions), deepcopy(entity))

    async def allocate_id(self, kind: str, parent: Optional[EntityKey] = None) -> EntityKey:
        return EntityKey(kind=kind, id=next(self._ids), parent=parent)

    async def get(self, key: EntityKey) -> Optional[Entity]:
        row = self._rows.get(key)
        return deepcopy(row[1]) if row else None

    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        return [deepcopy(self._rows[key][1]) for key in keys if key in self._rows]

    async def put(self, *entities: Entity) -> None:
        async with self._commit_lock:
            for entity in entities:
                self._write(entity)

    async def delete(self, key: EntityKey) -> None:
        async with self._commit_lock:
            self._rows.pop(key, None)

    async def query(
        self,
        kind: str,
        *,
        ancestor: Optional[EntityKey] = None,
        filters: Sequence[Filter] = (),
        order_by: Sequence[str] = (),
    ) -> List[Entity]:
        validate_native_filters(filters)
        found = [
            entity
            for key, (_, entity) in self._rows.items()
            if key.kind == kind
            and (ancestor is None or key.is_descendant_of(ancestor))
            and matches_all(entity, filters)
        ]
        return deepcopy(sort_entities(found, order_by))

    async def run_in_transaction(self, work: Callable[[ITransaction], Awaitable[_T]]) -> _T:
        txn = InMemoryTransaction(self)
        result = await work(txn)

        async with self._commit_lock:
            if conflicts := txn.conflicting_keys():
                metrics.record_transaction_conflict(store='memory')
                Logger.base.warning(
                    f'⚔️ [STORE] Transaction conflict on {[str(k) for k in conflicts]}'
                )
                raise TransactionConflictError(
                    'Transaction conflict: entities were modified concurrently'
                )
            for entity in txn.writes.values():
                self._write(entity)

        await run_commit_callbacks(txn.callbacks)
        return result

