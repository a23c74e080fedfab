from datetime import datetime
from typing import ClassVar, List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.value_object.conference_form import ConferenceForm
from src.service.conference.domain.value_object.entity_key import EntityKey


@attrs.define
class Conference:
    KIND: ClassVar[str] = 'Conference'

    key: EntityKey  # Profile(organizer) -> Conference(id)
    name: str
    organizer_user_id: str
    description: Optional[str] = None
    organizer_display_name: Optional[str] = None
    topics: List[str] = attrs.field(factory=list)
    city: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    month: int = 0
    max_attendees: int = 0
    seats_available: int = 0

    @staticmethod
    def validate(form: ConferenceForm) -> None:
        if not form.name:
            raise DomainError('The name is required')
        if form.max_attendees < 0:
            raise DomainError('max_attendees must not be negative')
        if form.start_date and form.end_date and form.end_date < form.start_date:
            raise DomainError('end_date must not be before start_date')

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        key: EntityKey,
        organizer: Profile,
        form: ConferenceForm,
    ) -> 'Conference':
        cls.validate(form)
        return cls(
            key=key,
            name=form.name,
            organizer_user_id=organizer.user_id,
            organizer_display_name=organizer.display_name,
            description=form.description,
            topics=list(form.topics),
            city=form.city,
            start_date=form.start_date,
            end_date=form.end_date,
            month=form.start_date.month if form.start_date else 0,
            max_attendees=form.max_attendees,
            seats_available=form.max_attendees,
        )

    @property
    def id(self) -> int:
        return int(self.key.id)

    @property
    def websafe_key(self) -> str:
        return self.key.to_websafe()

    def book_seats(self, number: int) -> None:
        if number <= 0:
            raise DomainError('Number of seats must be positive')
        if number > self.seats_available:
            raise DomainError('There are no seats available')
        self.seats_available -= number

    def give_back_seats(self, number: int) -> None:
        if number <= 0:
            raise DomainError('Number of seats must be positive')
        if self.seats_available + number > self.max_attendees:
            raise DomainError('The number of seats will exceed the capacity')
        self.seats_available += number

    def summary(self) -> str:
        """Plain-text description used in the organizer's confirmation e-mail."""
        lines = [f'Id: {self.id}', f'Name: {self.name}']
        if self.city:
            lines.append(f'City: {self.city}')
        if self.topics:
            lines.append(f'Topics: {", ".join(self.topics)}')
        if self.start_date:
            lines.append(f'StartDate: {self.start_date.isoformat()}')
        if self.end_date:
            lines.append(f'EndDate: {self.end_date.isoformat()}')
        lines.append(f'Max Attendees: {self.max_attendees}')
        return '\n'.join(lines) + '\n'
