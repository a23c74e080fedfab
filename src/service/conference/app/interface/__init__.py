"""Application layer interfaces (Ports)"""

from src.service.conference.app.interface.i_cache import ICache
from src.service.conference.app.interface.i_entity_store import Entity, IEntityStore, ITransaction
from src.service.conference.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)

__all__ = [
    'Entity',
    'ICache',
    'IEntityStore',
    'INotificationDispatcher',
    'ITransaction',
]
