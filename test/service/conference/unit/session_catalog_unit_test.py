"""
Unit tests for SessionCatalog

Test Coverage:
1. Session creation, normalization and the featured speaker
2. Listings and filtered queries, including queryProblem
3. Wishlist add / remove outcomes
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.conference.app.command.session_catalog import (
    SessionCatalog,
    build_featured_speaker_text,
)
from src.service.conference.app.dto.query_form import (
    QueryOperator,
    SessionQueryField,
    SessionQueryFilter,
    SessionQueryForm,
)
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.value_object.conference_form import ConferenceForm
from src.service.conference.domain.value_object.session_form import SessionForm


pytestmark = pytest.mark.unit


@pytest.fixture
async def conference(registry, organizer, conference_form):
    return await registry.create(organizer, conference_form)


class TestFeaturedSpeakerText:
    def test_needs_at_least_two_sessions(self):
        assert build_featured_speaker_text('Guido', []) is None

    @pytest.mark.asyncio
    async def test_lists_session_names(self, catalog, organizer, conference):
        first = await catalog.create(
            organizer, conference.key, SessionForm(name='A', speaker='Guido')
        )
        second = await catalog.create(
            organizer, conference.key, SessionForm(name='B', speaker='Guido')
        )

        assert build_featured_speaker_text('Guido', [first, second]) == 'Guido: A, B'


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create_normalizes_and_persists(
        self, catalog, entity_store, organizer, conference
    ):
        form = SessionForm(name='Late night', start_time=25, date=datetime(2026, 6, 10, 18, 30))

        session = await catalog.create(organizer, conference.key, form)

        assert session.start_time == 0
        assert session.date == datetime(2026, 6, 10, 0, 0)
        assert session.conference_key == conference.key
        assert await entity_store.get(session.key) == session

    @pytest.mark.asyncio
    async def test_second_session_by_a_speaker_sets_featured_speaker(
        self, catalog, announcement_feed, organizer, conference
    ):
        await catalog.create(organizer, conference.key, SessionForm(name='Intro', speaker='Guido'))
        assert await announcement_feed.get_featured_speaker() is None

        await catalog.create(
            organizer, conference.key, SessionForm(name='Deep dive', speaker='Guido')
        )

        featured = await announcement_feed.get_featured_speaker()
        assert featured is not None
        assert featured.startswith('Guido: ')
        assert sorted(featured.removeprefix('Guido: ').split(', ')) == ['Deep dive', 'Intro']

    @pytest.mark.asyncio
    async def test_featured_speaker_failure_does_not_fail_creation(
        self, entity_store, organizer, conference
    ):
        cache = AsyncMock()
        cache.set.side_effect = ConnectionError('cache down')
        catalog = SessionCatalog(entity_store=entity_store, cache=cache)

        await catalog.create(organizer, conference.key, SessionForm(name='A', speaker='Guido'))
        session = await catalog.create(
            organizer, conference.key, SessionForm(name='B', speaker='Guido')
        )

        cache.set.assert_awaited_once()
        assert await entity_store.get(session.key) is not None

    @pytest.mark.asyncio
    async def test_missing_name_fails_before_any_write(
        self, catalog, entity_store, organizer, conference
    ):
        entity_store.allocate_id = AsyncMock()

        with pytest.raises(DomainError):
            await catalog.create(organizer, conference.key, SessionForm(name=''))
        entity_store.allocate_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_conference_is_not_found(self, catalog, organizer):
        missing = Profile.key_for(organizer.user_id).child('Conference', 404)

        with pytest.raises(NotFoundError):
            await catalog.create(organizer, missing, SessionForm(name='A'))

    @pytest.mark.asyncio
    async def test_anonymous_caller_is_rejected(self, catalog, conference):
        with pytest.raises(AuthenticationError):
            await catalog.create(None, conference.key, SessionForm(name='A'))

    @pytest.mark.asyncio
    async def test_update_applies_the_same_normalization(
        self, catalog, entity_store, organizer, conference
    ):
        session = await catalog.create(
            organizer, conference.key, SessionForm(name='A', start_time=9)
        )

        await catalog.update(session, SessionForm(name='A2', start_time=24))

        stored = await entity_store.get(session.key)
        assert stored.name == 'A2'
        assert stored.start_time == 0


class TestSessionQueries:
    @pytest.fixture
    async def sessions(self, catalog, organizer, conference):
        return [
            await catalog.create(
                organizer,
                conference.key,
                SessionForm(name=name, start_time=start, type_of_session=kind, speaker=speaker),
            )
            for name, start, kind, speaker in [
                ('Morning', 9, 'Workshop', 'Ada'),
                ('Noon', 12, 'Keynote', 'Guido'),
                ('Evening', 20, 'Workshop', 'Guido'),
            ]
        ]

    @pytest.mark.asyncio
    async def test_query_problem_excludes_type_and_late_sessions(self, catalog, sessions):
        found = await catalog.query_problem(19, 'Workshop')

        assert [s.name for s in found] == ['Noon']
        assert found[0].start_time == 12
        assert found[0].type_of_session == 'Keynote'

    @pytest.mark.asyncio
    async def test_list_by_conference_is_ordered_by_name(self, catalog, conference, sessions):
        found = await catalog.list_by_conference(conference.key)

        assert [s.name for s in found] == ['Evening', 'Morning', 'Noon']

    @pytest.mark.asyncio
    async def test_list_by_conference_and_type(self, catalog, conference, sessions):
        found = await catalog.list_by_conference_and_type(conference.key, 'Workshop')

        assert [s.name for s in found] == ['Evening', 'Morning']

    @pytest.mark.asyncio
    async def test_list_by_speaker_spans_conferences(
        self, catalog, registry, organizer, conference, sessions
    ):
        other = await registry.create(organizer, ConferenceForm(name='Other'))
        await catalog.create(organizer, other.key, SessionForm(name='Elsewhere', speaker='Guido'))

        found = await catalog.list_by_speaker('Guido')

        assert sorted(s.name for s in found) == ['Elsewhere', 'Evening', 'Noon']

    @pytest.mark.asyncio
    async def test_query_sessions_with_range_and_not_equal(self, catalog, sessions):
        form = SessionQueryForm(
            filters=[
                SessionQueryFilter(SessionQueryField.START_TIME, QueryOperator.GTEQ, 10),
                SessionQueryFilter(SessionQueryField.SPEAKER, QueryOperator.NE, 'Ada'),
            ]
        )

        found = await catalog.query(form)

        assert [s.name for s in found] == ['Noon', 'Evening']


class TestWishlist:
    @pytest.fixture
    async def session(self, catalog, organizer, conference):
        return await catalog.create(organizer, conference.key, SessionForm(name='Intro'))

    @pytest.mark.asyncio
    async def test_add_and_list(self, catalog, attendee, session):
        outcome = await catalog.add_to_wishlist(attendee, session.key)

        assert outcome.success is True
        assert [s.key for s in await catalog.list_wishlist(attendee)] == [session.key]

    @pytest.mark.asyncio
    async def test_duplicate_add_is_a_conflict(self, catalog, attendee, session):
        await catalog.add_to_wishlist(attendee, session.key)

        with pytest.raises(ConflictError, match='You have already added to your wishlist'):
            await catalog.add_to_wishlist(attendee, session.key)

    @pytest.mark.asyncio
    async def test_removing_absent_entry_is_forbidden(self, catalog, attendee, session):
        with pytest.raises(ForbiddenError, match="You've not added this session"):
            await catalog.remove_from_wishlist(attendee, session.key)

    @pytest.mark.asyncio
    async def test_remove_only_touches_the_profile(self, catalog, entity_store, attendee, session):
        await catalog.add_to_wishlist(attendee, session.key)

        outcome = await catalog.remove_from_wishlist(attendee, session.key)

        assert outcome.success is True
        profile = await entity_store.get(Profile.key_for(attendee.user_id))
        assert profile.session_keys_in_wishlist == []
        assert await entity_store.get(session.key) == session

    @pytest.mark.asyncio
    async def test_unknown_session_is_not_found(self, catalog, attendee, session):
        missing = session.conference_key.child('Session', 404)

        with pytest.raises(NotFoundError, match='No Session found'):
            await catalog.add_to_wishlist(attendee, missing)

    @pytest.mark.asyncio
    async def test_list_wishlist_needs_a_profile(self, catalog, attendee):
        with pytest.raises(NotFoundError, match="Profile doesn't exist."):
            await catalog.list_wishlist(attendee)
