from datetime import datetime
from typing import ClassVar, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.session_form import SessionForm


DEFAULT_SPEAKER = 'Undefined'
DEFAULT_TYPE_OF_SESSION = 'Undefined'


@attrs.define
class Session:
    KIND: ClassVar[str] = 'Session'

    key: EntityKey  # Conference key -> Session(id)
    name: str
    highlights: Optional[str] = None
    speaker: str = DEFAULT_SPEAKER
    type_of_session: str = DEFAULT_TYPE_OF_SESSION
    start_time: int = 0
    date: Optional[datetime] = None
    duration: int = 0

    @staticmethod
    def validate(form: SessionForm) -> None:
        if not form.name:
            raise DomainError('The name is required')

    @classmethod
    def create(cls, *, key: EntityKey, form: SessionForm) -> 'Session':
        if key.parent is None:
            raise DomainError('A session key needs a conference parent')
        session = cls(key=key, name='')
        session.update_with_form(form)
        return session

    @property
    def id(self) -> int:
        return int(self.key.id)

    @property
    def websafe_key(self) -> str:
        return self.key.to_websafe()

    @property
    def conference_key(self) -> EntityKey:
        assert self.key.parent is not None
        return self.key.parent

    @property
    def conference_websafe_key(self) -> str:
        return self.conference_key.to_websafe()

    @property
    def conference_id(self) -> int:
        return int(self.conference_key.id)

    def update_with_form(self, form: SessionForm) -> None:
        """
        Assign every field from the form, applying defaults and normalization.

        - speaker / type_of_session fall back to 'Undefined'
        - start_time outside [0, 24) becomes 0
        - date keeps its day; its hour becomes start_time, minutes and below are zeroed
        """
        self.validate(form)

        start_time = form.start_time
        if start_time < 0 or start_time >= 24:
            start_time = 0

        self.name = form.name
        self.highlights = form.highlights
        self.speaker = form.speaker if form.speaker is not None else DEFAULT_SPEAKER
        self.type_of_session = (
            form.type_of_session if form.type_of_session is not None else DEFAULT_TYPE_OF_SESSION
        )
        self.duration = form.duration
        self.start_time = start_time
        self.date = (
            form.date.replace(hour=start_time, minute=0, second=0, microsecond=0)
            if form.date is not None
            else None
        )
