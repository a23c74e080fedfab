"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.conference.app.command import (
    conference_registry,
    profile_service,
    session_catalog,
    set_announcement_use_case,
)
from src.service.conference.app.query import announcement_feed, query_composer
from src.service.conference.driving_adapter.http_controller import (
    announcement_controller,
    conference_controller,
    profile_controller,
    session_controller,
)
from src.service.conference.driving_adapter.http_controller.auth import current_identity


WIRE_MODULES: list[ModuleType] = [
    profile_service,
    conference_registry,
    session_catalog,
    set_announcement_use_case,
    query_composer,
    announcement_feed,
    current_identity,
    profile_controller,
    conference_controller,
    session_controller,
    announcement_controller,
]
