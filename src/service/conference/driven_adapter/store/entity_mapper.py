"""
Entity <-> ORM model conversion, one mapper per kind.

Keys are persisted as websafe strings (primary key) plus the ancestor path
used for ancestor queries. Key lists on Profile are stored as JSON arrays of
websafe strings.
"""

from typing import Any, Dict, FrozenSet, Generic, Type, TypeVar

from src.service.conference.domain.entity.conference_entity import Conference
from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.entity.session_entity import Session
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.driven_adapter.model.conference_model import ConferenceModel
from src.service.conference.driven_adapter.model.profile_model import ProfileModel
from src.service.conference.driven_adapter.model.session_model import SessionModel


_E = TypeVar('_E')
_M = TypeVar('_M')


class EntityMapper(Generic[_E, _M]):
    model: Type[_M]
    list_fields: FrozenSet[str] = frozenset()

    def to_entity(self, model: _M) -> _E:
        raise NotImplementedError

    def columns(self, entity: _E) -> Dict[str, Any]:
        raise NotImplementedError

    def to_model(self, entity: _E) -> _M:
        return self.model(**self.columns(entity))

    def apply(self, entity: _E, model: _M) -> None:
        for name, value in self.columns(entity).items():
            setattr(model, name, value)


class ProfileMapper(EntityMapper[Profile, ProfileModel]):
    model = ProfileModel
    list_fields = frozenset({'conference_keys_to_attend', 'session_keys_in_wishlist'})

    def to_entity(self, model: ProfileModel) -> Profile:
        return Profile(
            user_id=model.user_id,
            display_name=model.display_name,
            main_email=model.main_email,
            tee_shirt_size=TeeShirtSize(model.tee_shirt_size),
            conference_keys_to_attend=[
                EntityKey.from_websafe(k) for k in model.conference_keys_to_attend
            ],
            session_keys_in_wishlist=[
                EntityKey.from_websafe(k) for k in model.session_keys_in_wishlist
            ],
        )

    def columns(self, entity: Profile) -> Dict[str, Any]:
        return {
            'key': entity.key.to_websafe(),
            'path': entity.key.path,
            'user_id': entity.user_id,
            'display_name': entity.display_name,
            'main_email': entity.main_email,
            'tee_shirt_size': str(entity.tee_shirt_size),
            'conference_keys_to_attend': [k.to_websafe() for k in entity.conference_keys_to_attend],
            'session_keys_in_wishlist': [k.to_websafe() for k in entity.session_keys_in_wishlist],
        }


class ConferenceMapper(EntityMapper[Conference, ConferenceModel]):
    model = ConferenceModel
    list_fields = frozenset({'topics'})

    def to_entity(self, model: ConferenceModel) -> Conference:
        return Conference(
            key=EntityKey.from_websafe(model.key),
            name=model.name,
            organizer_user_id=model.organizer_user_id,
            description=model.description,
            organizer_display_name=model.organizer_display_name,
            topics=list(model.topics or []),
            city=model.city,
            start_date=model.start_date,
            end_date=model.end_date,
            month=model.month,
            max_attendees=model.max_attendees,
            seats_available=model.seats_available,
        )

    def columns(self, entity: Conference) -> Dict[str, Any]:
        return {
            'key': entity.key.to_websafe(),
            'path': entity.key.path,
            'name': entity.name,
            'description': entity.description,
            'organizer_user_id': entity.organizer_user_id,
            'organizer_display_name': entity.organizer_display_name,
            'topics': list(entity.topics),
            'city': entity.city,
            'start_date': entity.start_date,
            'end_date': entity.end_date,
            'month': entity.month,
            'max_attendees': entity.max_attendees,
            'seats_available': entity.seats_available,
        }


class SessionMapper(EntityMapper[Session, SessionModel]):
    model = SessionModel

    def to_entity(self, model: SessionModel) -> Session:
        return Session(
            key=EntityKey.from_websafe(model.key),
            name=model.name,
            highlights=model.highlights,
            speaker=model.speaker,
            type_of_session=model.type_of_session,
            start_time=model.start_time,
            date=model.date,
            duration=model.duration,
        )

    def columns(self, entity: Session) -> Dict[str, Any]:
        return {
            'key': entity.key.to_websafe(),
            'path': entity.key.path,
            'name': entity.name,
            'highlights': entity.highlights,
            'speaker': entity.speaker,
            'type_of_session': entity.type_of_session,
            'start_time': entity.start_time,
            'date': entity.date,
            'duration': entity.duration,
            'conference_key': entity.conference_websafe_key,
            'conference_id': entity.conference_id,
        }


MAPPERS: Dict[str, EntityMapper[Any, Any]] = {
    Profile.KIND: ProfileMapper(),
    Conference.KIND: ConferenceMapper(),
    Session.KIND: SessionMapper(),
}
