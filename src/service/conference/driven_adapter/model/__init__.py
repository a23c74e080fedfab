"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.conference.driven_adapter.model.conference_model import ConferenceModel
from src.service.conference.driven_adapter.model.id_allocation_model import IdAllocationModel
from src.service.conference.driven_adapter.model.profile_model import ProfileModel
from src.service.conference.driven_adapter.model.session_model import SessionModel

__all__ = [
    'ConferenceModel',
    'IdAllocationModel',
    'ProfileModel',
    'SessionModel',
]
