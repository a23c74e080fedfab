"""Conference Domain Enums"""

from src.service.conference.domain.enum.registration_reason import RegistrationReason
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize

__all__ = ['RegistrationReason', 'TeeShirtSize']
