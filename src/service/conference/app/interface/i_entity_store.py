"""
Entity Store Interface

Transactional document store addressed by hierarchical EntityKeys.

Query limits mirror the underlying datastore: any number of equality filters,
range filters on at most one field, no native '!='. Queries breaking these
limits raise UnsupportedQueryError; QueryComposer builds richer queries on top.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from src.service.conference.app.dto.entity_filter import Filter
from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.entity.session_entity import Session
from src.service.conference.domain.value_object.entity_key import EntityKey


Entity = Union[Profile, Conference, Session]
_T = TypeVar('_T')


class ITransaction(ABC):
    """Handle passed to a transaction body. Reads are tracked for the commit-time check."""

    @abstractmethod
    async def get(self, key: EntityKey) -> Optional[Entity]:
        pass

    @abstractmethod
    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        pass

    @abstractmethod
    def put(self, *entities: Entity) -> None:
        """Stage entities; written only if the transaction commits."""
        pass

    @abstractmethod
    def on_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a side effect that runs only after a successful commit."""
        pass


class IEntityStore(ABC):
    @abstractmethod
    async def allocate_id(self, kind: str, parent: Optional[EntityKey] = None) -> EntityKey:
        """Reserve a fresh numeric id for `kind` under `parent`."""
        pass

    @abstractmethod
    async def get(self, key: EntityKey) -> Optional[Entity]:
        pass

    @abstractmethod
    async def get_many(self, keys: Sequence[EntityKey]) -> List[Entity]:
        """
        Batch load.

        Returns:
            Found entities in the order of `keys`; absent keys are skipped
        """
        pass

    @abstractmethod
    async def put(self, *entities: Entity) -> None:
        pass

    @abstractmethod
    async def delete(self, key: EntityKey) -> None:
        pass

    @abstractmethod
    async def query(
        self,
        kind: str,
        *,
        ancestor: Optional[EntityKey] = None,
        filters: Sequence[Filter] = (),
        order_by: Sequence[str] = (),
    ) -> List[Entity]:
        """
        Native query.

        Args:
            kind: Entity kind, e.g. 'Conference'
            ancestor: Restrict to descendants of this key
            filters: Equality filters plus range filters on one field
            order_by: Field names, '-' prefix for descending

        Raises:
            UnsupportedQueryError: more than one range field, or a '!=' filter
        """
        pass

    @abstractmethod
    async def run_in_transaction(self, work: Callable[[ITransaction], Awaitable[_T]]) -> _T:
        """
        Run `work` atomically.

        Commits only if nothing `work` read or wrote changed concurrently.

        Raises:
            TransactionConflictError: a concurrent commit touched the same entities
        """
        pass
