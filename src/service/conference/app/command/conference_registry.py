import time
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.conference_metrics import metrics
from src.service.conference.app.command.profile_service import ProfileService, require_identity
from src.service.conference.app.dto.entity_filter import Operator
from src.service.conference.app.dto.query_form import ConferenceQueryForm
from src.service.conference.app.dto.transaction_outcome import (
    TransactionOutcome,
    raise_for_outcome,
    transact_outcome,
)
from src.service.conference.app.interface.i_entity_store import IEntityStore, ITransaction
from src.service.conference.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.conference.app.query.query_composer import QueryComposer
from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.enum.registration_reason import RegistrationReason
from src.service.conference.domain.value_object.conference_form import ConferenceForm
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity


class ConferenceRegistry:
    """
    Conferences and seat booking.

    Invariants kept by every write:
    - 0 <= seats_available <= max_attendees
    - a conference key appears at most once in a profile's attend list
    - registering/unregistering changes the attend list and the seat counter
      in the same transaction

    Dependencies:
    - entity_store: conferences and profiles
    - notification_dispatcher: organizer confirmation, sent after commit
    """

    def __init__(
        self,
        *,
        entity_store: IEntityStore,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.entity_store = entity_store
        self.notification_dispatcher = notification_dispatcher
        self.profile_service = ProfileService(entity_store=entity_store)
        self.query_composer = QueryComposer(entity_store=entity_store)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        entity_store: IEntityStore = Depends(Provide[Container.entity_store]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(entity_store=entity_store, notification_dispatcher=notification_dispatcher)

    @Logger.io
    async def create(self, identity: Optional[Identity], form: ConferenceForm) -> Conference:
        """
        Create a conference owned by the caller.

        The organizer profile (created on first use), the conference and the
        confirmation e-mail are committed together.

        Raises:
            AuthenticationError: no identity
            DomainError: missing name or negative capacity (before anything is written)
        """
        identity = require_identity(identity)
        Conference.validate(form)

        conference_key = await self.entity_store.allocate_id(
            Conference.KIND, parent=Profile.key_for(identity.user_id)
        )

        async def work(txn: ITransaction) -> Conference:
            profile = await self.profile_service.get_or_create(identity, reader=txn)
            conference = Conference.create(key=conference_key, organizer=profile, form=form)
            txn.put(profile, conference)
            if profile.main_email:
                self.notification_dispatcher.enqueue(
                    txn, recipient=profile.main_email, payload=conference.summary()
                )
            return conference

        conference = await self.entity_store.run_in_transaction(work)
        Logger.base.info(
            f'🎤 [CONFERENCE] Created "{conference.name}" ({conference.max_attendees} seats) '
            f'by {identity.user_id}'
        )
        return conference

    @Logger.io
    async def register(
        self, identity: Optional[Identity], conference_key: EntityKey
    ) -> TransactionOutcome:
        """
        Book one seat for the caller.

        Raises:
            NotFoundError: no such conference
            ConflictError: already registered, or sold out
            InternalTransactionError: unexpected failure or lost commit race
        """
        identity = require_identity(identity)
        websafe = conference_key.to_websafe()

        async def work(txn: ITransaction) -> TransactionOutcome:
            conference = await txn.get(conference_key)
            if not isinstance(conference, Conference):
                return TransactionOutcome.fail(
                    RegistrationReason.NOT_FOUND, f'No Conference found with key: {websafe}'
                )

            profile = await self.profile_service.get_or_create(identity, reader=txn)
            if profile.is_attending(conference_key):
                return TransactionOutcome.fail(RegistrationReason.ALREADY_REGISTERED)
            if conference.seats_available <= 0:
                return TransactionOutcome.fail(RegistrationReason.NO_SEATS_AVAILABLE)

            profile.add_conference_to_attend(conference_key)
            conference.book_seats(1)
            txn.put(profile, conference)
            return TransactionOutcome.ok('Registration successful')

        start = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.register_for_conference',
            attributes={'conference.key': websafe, 'user.id': identity.user_id},
        ):
            outcome = await transact_outcome(self.entity_store, work, operation='REGISTER')

        self._record('register', outcome, time.perf_counter() - start)
        if outcome.success:
            Logger.base.info(f'🎫 [REGISTER] {identity.user_id} registered for {websafe}')
        return raise_for_outcome(outcome)

    @Logger.io
    async def unregister(
        self, identity: Optional[Identity], conference_key: EntityKey
    ) -> TransactionOutcome:
        """
        Release the caller's seat.

        Raises:
            NotFoundError: no such conference
            ForbiddenError: caller is not registered
            InternalTransactionError: unexpected failure or lost commit race
        """
        identity = require_identity(identity)
        websafe = conference_key.to_websafe()

        async def work(txn: ITransaction) -> TransactionOutcome:
            conference = await txn.get(conference_key)
            if not isinstance(conference, Conference):
                return TransactionOutcome.fail(
                    RegistrationReason.NOT_FOUND, f'No Conference found with key: {websafe}'
                )

            profile = await self.profile_service.get_or_create(identity, reader=txn)
            if not profile.is_attending(conference_key):
                return TransactionOutcome.fail(RegistrationReason.NOT_REGISTERED)

            profile.remove_conference_to_attend(conference_key)
            conference.give_back_seats(1)
            txn.put(profile, conference)
            return TransactionOutcome.ok()

        start = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.unregister_from_conference',
            attributes={'conference.key': websafe, 'user.id': identity.user_id},
        ):
            outcome = await transact_outcome(self.entity_store, work, operation='UNREGISTER')

        self._record('unregister', outcome, time.perf_counter() - start)
        if outcome.success:
            Logger.base.info(f'🎫 [UNREGISTER] {identity.user_id} released a seat of {websafe}')
        return raise_for_outcome(outcome)

    def _record(self, operation: str, outcome: TransactionOutcome, duration: float) -> None:
        metrics.record_registration(
            operation=operation,
            result='success' if outcome.success else 'failure',
            reason=str(outcome.reason or ''),
            duration=duration,
        )

    @Logger.io
    async def list_created_by(self, identity: Optional[Identity]) -> List[Conference]:
        identity = require_identity(identity)
        found = await self.entity_store.query(
            Conference.KIND, ancestor=Profile.key_for(identity.user_id)
        )
        return [c for c in found if isinstance(c, Conference)]

    @Logger.io
    async def get_by_key(self, conference_key: EntityKey) -> Conference:
        conference = await self.entity_store.get(conference_key)
        if not isinstance(conference, Conference):
            raise NotFoundError(f'No Conference found with key: {conference_key.to_websafe()}')
        return conference

    @Logger.io
    async def list_to_attend(self, identity: Optional[Identity]) -> List[Conference]:
        profile = await self.profile_service.get_existing(identity)
        if profile is None:
            raise NotFoundError("Profile doesn't exist.")
        found = await self.entity_store.get_many(profile.conference_keys_to_attend)
        return [c for c in found if isinstance(c, Conference)]

    @Logger.io
    async def query(self, form: ConferenceQueryForm) -> List[Conference]:
        """
        Filtered conference listing.

        Ordered by name, or by the first inequality field and then name.
        """
        filters = form.to_filters()
        inequality_fields = [f.field for f in filters if f.operator is not Operator.EQ]
        order_by = [inequality_fields[0], 'name'] if inequality_fields else ['name']

        found = await self.query_composer.compose(Conference.KIND, filters, order_by=order_by)
        return [c for c in found if isinstance(c, Conference)]
