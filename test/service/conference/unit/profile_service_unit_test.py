from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import AuthenticationError
from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize
from src.service.conference.domain.value_object.entity_key import EntityKey


pytestmark = pytest.mark.unit


class TestProfileService:
    @pytest.mark.asyncio
    async def test_get_or_create_does_not_persist(self, profile_service, entity_store, attendee):
        profile = await profile_service.get_or_create(attendee)

        assert profile.display_name == 'alice'
        assert await entity_store.get(Profile.key_for(attendee.user_id)) is None

    @pytest.mark.asyncio
    async def test_save_profile_creates_then_updates(
        self, profile_service, entity_store, attendee
    ):
        await profile_service.save_profile(attendee, tee_shirt_size=TeeShirtSize.M)
        saved = await profile_service.save_profile(attendee, display_name='Alice L.')

        stored = await entity_store.get(Profile.key_for(attendee.user_id))
        assert stored == saved
        assert stored.display_name == 'Alice L.'
        assert stored.tee_shirt_size is TeeShirtSize.M

    @pytest.mark.asyncio
    async def test_get_existing_is_none_before_first_save(self, profile_service, attendee):
        assert await profile_service.get_existing(attendee) is None

    @pytest.mark.asyncio
    async def test_anonymous_caller_is_rejected(self, profile_service):
        with pytest.raises(AuthenticationError, match='Authorization required'):
            await profile_service.save_profile(None, display_name='x')

    @pytest.mark.asyncio
    async def test_get_or_create_ignores_a_non_profile_record(self, profile_service, attendee):
        reader = AsyncMock()
        reader.get.return_value = Conference(
            key=EntityKey('Conference', 1), name='PyCon', organizer_user_id='organizer-1'
        )

        profile = await profile_service.get_or_create(attendee, reader=reader)

        assert isinstance(profile, Profile)
        assert profile.key == Profile.key_for(attendee.user_id)
