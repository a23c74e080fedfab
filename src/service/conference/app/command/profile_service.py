from typing import Optional, Protocol, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.conference.app.interface.i_entity_store import Entity, IEntityStore
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity


class _KeyReader(Protocol):
    async def get(self, key: EntityKey) -> Optional[Entity]: ...


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise AuthenticationError('Authorization required')
    return identity


class ProfileService:
    """
    Attendee profiles.

    A profile is created lazily: readers get an unsaved default profile for
    first-time callers, and it is persisted by whichever write touches it first.
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
    async def get_or_create(
        self, identity: Optional[Identity], *, reader: Optional[_KeyReader] = None
    ) -> Profile:
        """
        Load the caller's profile, or build an unsaved default one.

        Args:
            identity: Authenticated caller
            reader: Transaction handle to read through; the store when omitted

        Raises:
            AuthenticationError: no identity
        """
        identity = require_identity(identity)
        source = reader or self.entity_store
        profile = await source.get(Profile.key_for(identity.user_id))
        return profile if isinstance(profile, Profile) else Profile.create_default(identity)

    @Logger.io
    async def get_existing(self, identity: Optional[Identity]) -> Optional[Profile]:
        identity = require_identity(identity)
        profile = await self.entity_store.get(Profile.key_for(identity.user_id))
        return profile if isinstance(profile, Profile) else None

    def update(
        self,
        profile: Profile,
        *,
        display_name: Optional[str] = None,
        tee_shirt_size: Optional[TeeShirtSize] = None,
    ) -> Profile:
        profile.update(display_name=display_name, tee_shirt_size=tee_shirt_size)
        return profile

    @Logger.io
    async def save_profile(
        self,
        identity: Optional[Identity],
        *,
        display_name: Optional[str] = None,
        tee_shirt_size: Optional[TeeShirtSize] = None,
    ) -> Profile:
        """Create or update the caller's profile and persist it."""
        profile = await self.get_or_create(identity)
        self.update(profile, display_name=display_name, tee_shirt_size=tee_shirt_size)

        await self.entity_store.put(profile)
        Logger.base.info(f'👤 [PROFILE] Saved profile for {profile.user_id}')
        return profile
