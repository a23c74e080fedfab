from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.conference_metrics import metrics
from src.service.conference.app.command.profile_service import ProfileService, require_identity
from src.service.conference.app.dto.entity_filter import Filter, Operator
from src.service.conference.app.dto.query_form import SessionQueryForm
from src.service.conference.app.dto.transaction_outcome import (
    TransactionOutcome,
    raise_for_outcome,
    transact_outcome,
)
from src.service.conference.app.interface.i_cache import ICache
from src.service.conference.app.interface.i_entity_store import IEntityStore, ITransaction
from src.service.conference.app.query.announcement_feed import AnnouncementFeed
from src.service.conference.app.query.query_composer import QueryComposer
from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.entity.session_entity import Session
from src.service.conference.domain.enum.registration_reason import RegistrationReason
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.domain.value_object.session_form import SessionForm


def build_featured_speaker_text(speaker: str, sessions: List[Session]) -> Optional[str]:
    """'{speaker}: name1, name2' when the speaker has at least two sessions, else None."""
    if len(sessions) < 2:
        return None
    names = [s.name for s in sessions if s.name is not None]
    return f'{speaker}: ' + ', '.join(names)


class SessionCatalog:
    """
    Sessions, wishlists and the featured speaker.

    Dependencies:
    - entity_store: sessions, conferences (existence) and profiles (wishlists)
    - cache: featured-speaker slot, written after a speaker's second session
    """

    def __init__(self, *, entity_store: IEntityStore, cache: ICache) -> None:
        self.entity_store = entity_store
        self.profile_service = ProfileService(entity_store=entity_store)
        self.query_composer = QueryComposer(entity_store=entity_store)
        self.announcement_feed = AnnouncementFeed(cache=cache)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        entity_store: IEntityStore = Depends(Provide[Container.entity_store]),
        cache: ICache = Depends(Provide[Container.cache]),
    ) -> Self:
        return cls(entity_store=entity_store, cache=cache)

    # ========== Catalog ==========

    @Logger.io
    async def create(
        self, identity: Optional[Identity], conference_key: EntityKey, form: SessionForm
    ) -> Session:
        """
        Add a session to a conference, then refresh the featured speaker.

        Raises:
            AuthenticationError: no identity
            DomainError: missing name (before anything is written)
            NotFoundError: no such conference
        """
        require_identity(identity)
        Session.validate(form)

        if not isinstance(await self.entity_store.get(conference_key), Conference):
            raise NotFoundError(f'No Conference found with key: {conference_key.to_websafe()}')

        session_key = await self.entity_store.allocate_id(Session.KIND, parent=conference_key)
        session = Session.create(key=session_key, form=form)
        await self.entity_store.put(session)
        Logger.base.info(f'🗓️ [SESSION] Created "{session.name}" in {conference_key}')

        await self._refresh_featured_speaker(conference_key, session.speaker)
        return session

    async def _refresh_featured_speaker(self, conference_key: EntityKey, speaker: str) -> None:
        try:
            sessions = await self.entity_store.query(
                Session.KIND,
                ancestor=conference_key,
                filters=[Filter('speaker', Operator.EQ, speaker)],
            )
            text = build_featured_speaker_text(
                speaker, [s for s in sessions if isinstance(s, Session)]
            )
            if text is not None:
                await self.announcement_feed.set_featured_speaker(text)
                Logger.base.info(f'🌟 [FEATURED] {text}')
        except Exception as e:
            # Best-effort: the session is already saved
            Logger.base.opt(exception=e).warning(f'🌟 [FEATURED] Refresh failed: {e}')

    @Logger.io
    async def update(self, session: Session, form: SessionForm) -> Session:
        session.update_with_form(form)
        await self.entity_store.put(session)
        return session

    @Logger.io
    async def get_by_key(self, session_key: EntityKey) -> Session:
        session = await self.entity_store.get(session_key)
        if not isinstance(session, Session):
            raise NotFoundError(f'No Session found with key: {session_key.to_websafe()}')
        return session

    @Logger.io
    async def list_by_conference(self, conference_key: EntityKey) -> List[Session]:
        found = await self.entity_store.query(
            Session.KIND, ancestor=conference_key, order_by=['name']
        )
        return [s for s in found if isinstance(s, Session)]

    @Logger.io
    async def list_by_conference_and_type(
        self, conference_key: EntityKey, type_of_session: str
    ) -> List[Session]:
        found = await self.entity_store.query(
            Session.KIND,
            ancestor=conference_key,
            filters=[Filter('type_of_session', Operator.EQ, type_of_session)],
            order_by=['name'],
        )
        return [s for s in found if isinstance(s, Session)]

    @Logger.io
    async def list_by_speaker(self, speaker: str) -> List[Session]:
        found = await self.entity_store.query(
            Session.KIND, filters=[Filter('speaker', Operator.EQ, speaker)]
        )
        return [s for s in found if isinstance(s, Session)]

    @Logger.io
    async def query(self, form: SessionQueryForm) -> List[Session]:
        filters = form.to_filters()
        inequality_fields = [f.field for f in filters if f.operator is not Operator.EQ]
        order_by = [inequality_fields[0], 'name'] if inequality_fields else ['name']

        found = await self.query_composer.compose(Session.KIND, filters, order_by=order_by)
        return [s for s in found if isinstance(s, Session)]

    @Logger.io
    async def query_problem(self, start_time_before: int, excluding_type: str) -> List[Session]:
        """Sessions starting before `start_time_before` whose type is not `excluding_type`."""
        found = await self.query_composer.compose(
            Session.KIND,
            [
                Filter('start_time', Operator.LT, start_time_before),
                Filter('type_of_session', Operator.NE, excluding_type),
            ],
        )
        return [s for s in found if isinstance(s, Session)]

    # ========== Wishlist ==========

    @Logger.io
    async def add_to_wishlist(
        self, identity: Optional[Identity], session_key: EntityKey
    ) -> TransactionOutcome:
        """
        Raises:
            NotFoundError: no such session
            ConflictError: already in the wishlist
            InternalTransactionError: unexpected failure or lost commit race
        """
        identity = require_identity(identity)
        websafe = session_key.to_websafe()

        async def work(txn: ITransaction) -> TransactionOutcome:
            if not isinstance(await txn.get(session_key), Session):
                return TransactionOutcome.fail(
                    RegistrationReason.NOT_FOUND, f'No Session found with key: {websafe}'
                )

            profile = await self.profile_service.get_or_create(identity, reader=txn)
            if profile.has_in_wishlist(session_key):
                return TransactionOutcome.fail(RegistrationReason.ALREADY_IN_WISHLIST)

            profile.add_session_to_wishlist(session_key)
            txn.put(profile)
            return TransactionOutcome.ok('Successfully added to your wishlist')

        with self.tracer.start_as_current_span(
            'use_case.add_session_to_wishlist',
            attributes={'session.key': websafe, 'user.id': identity.user_id},
        ):
            outcome = await transact_outcome(self.entity_store, work, operation='WISHLIST')

        self._record('add', outcome)
        return raise_for_outcome(outcome)

    @Logger.io
    async def remove_from_wishlist(
        self, identity: Optional[Identity], session_key: EntityKey
    ) -> TransactionOutcome:
        """
        Raises:
            NotFoundError: no such session
            ForbiddenError: not in the wishlist
            InternalTransactionError: unexpected failure or lost commit race
        """
        identity = require_identity(identity)
        websafe = session_key.to_websafe()

        async def work(txn: ITransaction) -> TransactionOutcome:
            if not isinstance(await txn.get(session_key), Session):
                return TransactionOutcome.fail(
                    RegistrationReason.NOT_FOUND, f'No Session found with key: {websafe}'
                )

            profile = await self.profile_service.get_or_create(identity, reader=txn)
            if not profile.has_in_wishlist(session_key):
                return TransactionOutcome.fail(RegistrationReason.NOT_IN_WISHLIST)

            profile.remove_session_from_wishlist(session_key)
            txn.put(profile)
            return TransactionOutcome.ok()

        with self.tracer.start_as_current_span(
            'use_case.remove_session_from_wishlist',
            attributes={'session.key': websafe, 'user.id': identity.user_id},
        ):
            outcome = await transact_outcome(self.entity_store, work, operation='WISHLIST')

        self._record('remove', outcome)
        return raise_for_outcome(outcome)

    def _record(self, operation: str, outcome: TransactionOutcome) -> None:
        metrics.record_wishlist(
            operation=operation,
            result='success' if outcome.success else 'failure',
            reason=str(outcome.reason or ''),
        )

    @Logger.io
    async def list_wishlist(self, identity: Optional[Identity]) -> List[Session]:
        profile = await self.profile_service.get_existing(identity)
        if profile is None:
            raise NotFoundError("Profile doesn't exist.")
        found = await self.entity_store.get_many(profile.session_keys_in_wishlist)
        return [s for s in found if isinstance(s, Session)]
