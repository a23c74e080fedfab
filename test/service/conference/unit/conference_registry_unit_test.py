"""
Unit tests for ConferenceRegistry

Test Coverage:
1. Conference creation (validation, organizer profile, confirmation e-mail)
2. Register / unregister outcomes and seat bounds
3. Lost commit races and unexpected failures surface as InternalTransactionError
4. Listing and filtered queries
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InternalTransactionError,
    NotFoundError,
)
from src.service.conference.app.command.conference_registry import ConferenceRegistry
from src.service.conference.app.dto.query_form import (
    ConferenceQueryField,
    ConferenceQueryFilter,
    ConferenceQueryForm,
    QueryOperator,
)
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.value_object.conference_form import ConferenceForm


pytestmark = pytest.mark.unit


def _race_after_body(entity_store, rival):
    """Run `rival(store)` after the transaction body and before its commit."""
    original = entity_store.run_in_transaction

    async def racing(work):
        async def raced(txn):
            result = await work(txn)
            await rival(entity_store)
            return result

        return await original(raced)

    entity_store.run_in_transaction = racing


class TestCreateConference:
    @pytest.mark.asyncio
    async def test_create_sets_seats_and_organizer(
        self, registry, entity_store, organizer, conference_form
    ):
        conference = await registry.create(organizer, conference_form)

        assert conference.seats_available == conference_form.max_attendees
        assert conference.organizer_display_name == 'organizer'
        assert conference.key.parent == Profile.key_for(organizer.user_id)
        assert await entity_store.get(conference.key) == conference
        assert await entity_store.get(Profile.key_for(organizer.user_id)) is not None

    @pytest.mark.asyncio
    async def test_confirmation_mail_is_sent_after_commit(
        self, registry, email_sender, organizer, conference_form
    ):
        conference = await registry.create(organizer, conference_form)

        assert len(email_sender.sent_emails) == 1
        mail = email_sender.sent_emails[0]
        assert mail['to'] == organizer.email
        assert mail['subject'] == 'You created a new Conference!'
        assert f'Id: {conference.id}' in mail['body']

    @pytest.mark.asyncio
    async def test_no_mail_when_the_creating_transaction_loses(
        self, registry, entity_store, email_sender, organizer, conference_form
    ):
        async def rival(store):
            await store.put(Profile.create_default(organizer))

        _race_after_body(entity_store, rival)

        with pytest.raises(ConflictError):
            await registry.create(organizer, conference_form)
        assert email_sender.sent_emails == []

    @pytest.mark.asyncio
    async def test_missing_name_fails_before_any_write(self, registry, entity_store, organizer):
        entity_store.allocate_id = AsyncMock()

        with pytest.raises(DomainError, match='The name is required'):
            await registry.create(organizer, ConferenceForm(name=None))
        entity_store.allocate_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_caller_is_rejected(self, registry, conference_form):
        with pytest.raises(AuthenticationError):
            await registry.create(None, conference_form)


class TestRegistration:
    @pytest.fixture
    async def conference(self, registry, organizer, conference_form):
        return await registry.create(organizer, conference_form)

    @pytest.mark.asyncio
    async def test_register_books_one_seat(self, registry, entity_store, conference, attendee):
        outcome = await registry.register(attendee, conference.key)

        assert outcome.success is True
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == conference.max_attendees - 1
        profile = await entity_store.get(Profile.key_for(attendee.user_id))
        assert profile.conference_keys_to_attend == [conference.key]

    @pytest.mark.asyncio
    async def test_register_then_unregister_restores_state(
        self, registry, entity_store, conference, attendee
    ):
        await registry.register(attendee, conference.key)
        outcome = await registry.unregister(attendee, conference.key)

        assert outcome.success is True
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == conference.max_attendees
        profile = await entity_store.get(Profile.key_for(attendee.user_id))
        assert profile.conference_keys_to_attend == []

    @pytest.mark.asyncio
    async def test_double_register_is_a_conflict_with_one_decrement(
        self, registry, entity_store, conference, attendee
    ):
        await registry.register(attendee, conference.key)

        with pytest.raises(ConflictError, match='You have already registered'):
            await registry.register(attendee, conference.key)
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == conference.max_attendees - 1

    @pytest.mark.asyncio
    async def test_register_when_sold_out_changes_nothing(
        self, registry, entity_store, conference, attendee, another_attendee, organizer
    ):
        await registry.register(attendee, conference.key)
        await registry.register(another_attendee, conference.key)

        with pytest.raises(ConflictError, match='There are no seats available'):
            await registry.register(organizer, conference.key)
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == 0
        profile = await entity_store.get(Profile.key_for(organizer.user_id))
        assert profile.conference_keys_to_attend == []

    @pytest.mark.asyncio
    async def test_unregister_without_registration_is_forbidden(
        self, registry, conference, attendee
    ):
        with pytest.raises(ForbiddenError, match='not registered'):
            await registry.unregister(attendee, conference.key)

    @pytest.mark.asyncio
    async def test_unknown_conference_is_not_found(self, registry, organizer, attendee):
        missing = Profile.key_for(organizer.user_id).child('Conference', 404)

        with pytest.raises(NotFoundError, match='No Conference found'):
            await registry.register(attendee, missing)
        with pytest.raises(NotFoundError):
            await registry.unregister(attendee, missing)

    @pytest.mark.asyncio
    async def test_concurrent_registers_never_oversell(
        self, registry, entity_store, organizer, attendee, another_attendee
    ):
        conference = await registry.create(
            organizer, ConferenceForm(name='Tiny', max_attendees=1)
        )

        results = await asyncio.gather(
            registry.register(attendee, conference.key),
            registry.register(another_attendee, conference.key),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, Exception)) == 1
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == 0

    @pytest.mark.asyncio
    async def test_lost_commit_race_is_an_internal_error(
        self, registry, entity_store, conference, attendee
    ):
        async def rival(store):
            other = await store.get(conference.key)
            other.book_seats(1)
            await store.put(other)

        _race_after_body(entity_store, rival)

        with pytest.raises(InternalTransactionError, match='Unknown exception'):
            await registry.register(attendee, conference.key)
        stored = await entity_store.get(conference.key)
        assert stored.seats_available == conference.max_attendees - 1
        assert await entity_store.get(Profile.key_for(attendee.user_id)) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_in_body_is_an_internal_error(
        self, attendee, conference
    ):
        store = AsyncMock()
        store.run_in_transaction.side_effect = RuntimeError('disk on fire')
        registry = ConferenceRegistry(entity_store=store, notification_dispatcher=AsyncMock())

        with pytest.raises(InternalTransactionError, match='Unknown exception'):
            await registry.register(attendee, conference.key)


class TestConferenceListing:
    @pytest.mark.asyncio
    async def test_list_created_by_only_returns_own_conferences(
        self, registry, organizer, attendee, conference_form
    ):
        mine = await registry.create(organizer, conference_form)
        await registry.create(attendee, ConferenceForm(name='Other'))

        found = await registry.list_created_by(organizer)

        assert [c.key for c in found] == [mine.key]

    @pytest.mark.asyncio
    async def test_list_to_attend_needs_a_profile(self, registry, attendee):
        with pytest.raises(NotFoundError, match="Profile doesn't exist."):
            await registry.list_to_attend(attendee)

    @pytest.mark.asyncio
    async def test_list_to_attend_returns_registered_conferences(
        self, registry, organizer, attendee, conference_form
    ):
        conference = await registry.create(organizer, conference_form)
        await registry.create(organizer, ConferenceForm(name='Skipped'))
        await registry.register(attendee, conference.key)

        found = await registry.list_to_attend(attendee)

        assert [c.name for c in found] == ['PyCon']

    @pytest.mark.asyncio
    async def test_get_by_key_raises_not_found(self, registry, organizer):
        with pytest.raises(NotFoundError):
            await registry.get_by_key(Profile.key_for(organizer.user_id).child('Conference', 1))

    @pytest.mark.asyncio
    async def test_query_orders_by_inequality_field_then_name(self, registry, organizer):
        for name, capacity in [('B', 50), ('A', 50), ('C', 10), ('D', 200)]:
            await registry.create(
                organizer, ConferenceForm(name=name, city='London', max_attendees=capacity)
            )
        await registry.create(organizer, ConferenceForm(name='E', city='Paris', max_attendees=100))

        found = await registry.query(
            ConferenceQueryForm(
                filters=[
                    ConferenceQueryFilter(ConferenceQueryField.CITY, QueryOperator.EQ, 'London'),
                    ConferenceQueryFilter(
                        ConferenceQueryField.MAX_ATTENDEES, QueryOperator.GT, 20
                    ),
                    ConferenceQueryFilter(
                        ConferenceQueryField.MAX_ATTENDEES, QueryOperator.NE, 200
                    ),
                ]
            )
        )

        assert [c.name for c in found] == ['A', 'B']

    @pytest.mark.asyncio
    async def test_query_by_topic_is_ordered_by_name(self, registry, organizer):
        await registry.create(organizer, ConferenceForm(name='Zed', topics=['Python']))
        await registry.create(organizer, ConferenceForm(name='Abc', topics=['Web', 'Python']))
        await registry.create(organizer, ConferenceForm(name='Go', topics=['Go']))

        found = await registry.query(
            ConferenceQueryForm(
                filters=[
                    ConferenceQueryFilter(ConferenceQueryField.TOPIC, QueryOperator.EQ, 'Python')
                ]
            )
        )

        assert [c.name for c in found] == ['Abc', 'Zed']
