"""Conference Domain Value Objects"""

from src.service.conference.domain.value_object.conference_form import ConferenceForm
from src.service.conference.domain.value_object.entity_key import EntityKey
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.domain.value_object.session_form import SessionForm

__all__ = ['ConferenceForm', 'EntityKey', 'Identity', 'SessionForm']
