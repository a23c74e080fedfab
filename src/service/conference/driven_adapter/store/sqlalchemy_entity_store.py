"""
SQLAlchemy Entity Store

One table per kind, keyed by the websafe EntityKey. Optimistic concurrency
comes from the ORM version column: an UPDATE whose version no longer matches
raises StaleDataError, and two inserts of one key raise IntegrityError. Both
surface as TransactionConflictError.

Predicates on scalar columns run in SQL. Predicates on list-valued columns
(Conference.topics) are evaluated after loading, with the same rules as the
in-memory store.
"""

from copy import deepcopy
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.sql.elements import ColumnElement

from src.platform.database.orm_db_setting import Database
from src.platform.exception.exceptions import DomainError, TransactionConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.conference_metrics import metrics
from src.service.conference.app.dto.entity_filter import (
    Filter,
    Operator,
    matches_all,
    sort_entities,
    validate_native_filters,
)
from src.service.conference.app.interface.i_entity_store import Entity, IEntityStore, ITransaction
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.driven_adapter.model.id_allocation_model import IdAllocationModel
from src.service.conference.driven_adapter.store.commit_callbacks import run_commit_callbacks
from src.service.conference.driven_adapter.store.entity_mapper import MAPPERS, EntityMapper


_T = TypeVar('_T')


def _mapper_for(kind: str) -> EntityMapper[Any, Any]:
    try:
        return MAPPERS[kind]
    except KeyError:
        raise DomainError(f'Unknown entity kind: {kind}')


def _column_predicate(column: Any, filter_: Filter) -> ColumnElement[bool]:
    if filter_.operator is Operator.EQ:
        return column == filter_.value
    if filter_.operator is Operator.LT:
        return column < filter_.value
    if filter_.operator is Operator.LTEQ:
        return column <= filter_.value
    if filter_.operator is Operator.GT:
        return column > filter_.value
    return column >= filter_.value


class SqlAlchemyTransaction(ITransaction):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._loaded: Dict[EntityKey, Any] = {}  # key -> model or None
        self._pending: Dict[EntityKey, Entity] = {}
        self._callbacks: List[Callable[[], Awaitable[None]]] = []

    async def _load(self, key: EntityKey) -> Any:
        if key not in self._loaded:
            # A kind with no table holds no rows
            mapper = MAPPERS.get(key.kind)
            self._loaded[key] = (
                await self._session.get(mapper.model, key.to_websafe()) if mapper else None
            )
        return self._loaded[key]

    async def get(self, key: EntityKey) -> Optional[Entity]:
        if key in self._pending:
            return deepcopy(self._pending[key])
        model = await self._load(key)
        return _mapper_for(key.kind).to_entity(model) if model is not None else None

    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        result = []
        for key in keys:
            entity = await self.get(key)
            if entity is not None:
                result.append(entity)
        return result

    def put(self, *entities: Entity) -> None:
        for entity in entities:
            self._pending[entity.key] = deepcopy(entity)

    def on_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._callbacks.append(callback)

    @property
    def callbacks(self) -> List[Callable[[], Awaitable[None]]]:
        return self._callbacks

    async def flush_pending(self) -> None:
        for key, entity in self._pending.items():
            mapper = _mapper_for(key.kind)
            model = await self._load(key)
            if model is None:
                self._session.add(mapper.to_model(entity))
            else:
                mapper.apply(entity, model)
        await self._session.flush()


class SqlAlchemyEntityStore(IEntityStore):
    def __init__(self, database: Database) -> None:
        self._database = database

    @Logger.io
    async def allocate_id(self, kind: str, parent: Optional[EntityKey] = None) -> EntityKey:
        async with self._database.session() as session:
            allocation = IdAllocationModel(kind=kind)
            session.add(allocation)
            await session.commit()
            return EntityKey(kind=kind, id=allocation.id, parent=parent)

    @Logger.io
    async def get(self, key: EntityKey) -> Optional[Entity]:
        mapper = MAPPERS.get(key.kind)
        if mapper is None:
            return None
        async with self._database.session() as session:
            model = await session.get(mapper.model, key.to_websafe())
            return mapper.to_entity(model) if model is not None else None

    @Logger.io
    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        found: Dict[EntityKey, Entity] = {}
        async with self._database.session() as session:
            for kind in {key.kind for key in keys} & MAPPERS.keys():
                mapper = MAPPERS[kind]
                websafe = [key.to_websafe() for key in keys if key.kind == kind]
                rows = await session.execute(select(mapper.model).where(mapper.model.key.in_(websafe)))
                for model in rows.scalars():
                    entity = mapper.to_entity(model)
                    found[entity.key] = entity
        return [found[key] for key in keys if key in found]

    @Logger.io
    async def put(self, *entities: Entity) -> None:
        async def work(txn: ITransaction) -> None:
            txn.put(*entities)

        await self.run_in_transaction(work)

    @Logger.io
    async def delete(self, key: EntityKey) -> None:
        mapper = MAPPERS.get(key.kind)
        if mapper is None:
            return
        async with self._database.session() as session:
            await session.execute(delete(mapper.model).where(mapper.model.key == key.to_websafe()))
            await session.commit()

    @Logger.io
    async def query(
        self,
        kind: str,
        *,
        ancestor: Optional[EntityKey] = None,
        filters: Sequence[Filter] = (),
        order_by: Sequence[str] = (),
    ) -> List[Entity]:
        validate_native_filters(filters)
        mapper = _mapper_for(kind)
        model = mapper.model

        stmt = select(model).order_by(model.path)
        if ancestor is not None:
            stmt = stmt.where(
                (model.path == ancestor.path)
                | model.path.startswith(f'{ancestor.path}/', autoescape=True)
            )

        in_memory: List[Filter] = []
        for filter_ in filters:
            if filter_.field in mapper.list_fields:
                in_memory.append(filter_)
            else:
                stmt = stmt.where(_column_predicate(getattr(model, filter_.field), filter_))

        async with self._database.session() as session:
            rows = await session.execute(stmt)
            entities = [mapper.to_entity(m) for m in rows.scalars()]

        return sort_entities([e for e in entities if matches_all(e, in_memory)], order_by)

    async def run_in_transaction(self, work: Callable[[ITransaction], Awaitable[_T]]) -> _T:
        async with self._database.session() as session:
            txn = SqlAlchemyTransaction(session)
            result = await work(txn)
            try:
                await txn.flush_pending()
                await session.commit()
            except (StaleDataError, IntegrityError) as e:
                await session.rollback()
                metrics.record_transaction_conflict(store='sqlalchemy')
                Logger.base.warning(f'⚔️ [STORE] Transaction conflict: {type(e).__name__}')
                raise TransactionConflictError(
                    'Transaction conflict: entities were modified concurrently'
                ) from e

        await run_commit_callbacks(txn.callbacks)
        return result
