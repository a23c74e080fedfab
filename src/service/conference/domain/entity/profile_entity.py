from typing import ClassVar, List, Optional

import attrs

from src.platform.exception.exceptions import ConflictError, ForbiddenError
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity


@attrs.define
class Profile:
    KIND: ClassVar[str] = 'Profile'

    user_id: str
    display_name: Optional[str]
    main_email: Optional[str]
    tee_shirt_size: TeeShirtSize = TeeShirtSize.NOT_SPECIFIED
    conference_keys_to_attend: List[EntityKey] = attrs.field(factory=list)
    session_keys_in_wishlist: List[EntityKey] = attrs.field(factory=list)

    @property
    def key(self) -> EntityKey:
        return self.key_for(self.user_id)

    @classmethod
    def key_for(cls, user_id: str) -> EntityKey:
        return EntityKey(kind=cls.KIND, id=user_id)

    @classmethod
    def create_default(cls, identity: Identity) -> 'Profile':
        """Unsaved profile for a first-time caller, named after the e-mail local part."""
        return cls(
            user_id=identity.user_id,
            display_name=identity.email_local_part,
            main_email=identity.email,
            tee_shirt_size=TeeShirtSize.NOT_SPECIFIED,
        )

    def update(
        self,
        *,
        display_name: Optional[str] = None,
        tee_shirt_size: Optional[TeeShirtSize] = None,
    ) -> None:
        if display_name is not None:
            self.display_name = display_name
        if tee_shirt_size is not None:
            self.tee_shirt_size = tee_shirt_size

    # ========== Conferences to attend ==========

    def is_attending(self, conference_key: EntityKey) -> bool:
        return conference_key in self.conference_keys_to_attend

    def add_conference_to_attend(self, conference_key: EntityKey) -> None:
        if self.is_attending(conference_key):
            raise ConflictError(f'Already attending conference: {conference_key.to_websafe()}')
        self.conference_keys_to_attend.append(conference_key)

    def remove_conference_to_attend(self, conference_key: EntityKey) -> None:
        if not self.is_attending(conference_key):
            raise ForbiddenError(f'Invalid conferenceKey: {conference_key.to_websafe()}')
        self.conference_keys_to_attend.remove(conference_key)

    # ========== Session wishlist ==========

    def has_in_wishlist(self, session_key: EntityKey) -> bool:
        return session_key in self.session_keys_in_wishlist

    def add_session_to_wishlist(self, session_key: EntityKey) -> None:
        if self.has_in_wishlist(session_key):
            raise ConflictError(f'Session already in wishlist: {session_key.to_websafe()}')
        self.session_keys_in_wishlist.append(session_key)

    def remove_session_from_wishlist(self, session_key: EntityKey) -> None:
        if not self.has_in_wishlist(session_key):
            raise ForbiddenError(f'Invalid sessionKey: {session_key.to_websafe()}')
        self.session_keys_in_wishlist.remove(session_key)
