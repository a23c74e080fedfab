"""
Test Configuration and Fixtures

This module provides:
- Environment setup (in-memory store and cache, test log directory)
- Identity fixtures for the calling user and a second attendee
- Service fixtures wired to a fresh InMemoryEntityStore per test

Architecture:
- Unit tests (test/**/unit/): in-memory adapters or AsyncMock collaborators
- Integration tests (test/**/integration/): SQLite-backed store and the FastAPI app
"""

# =============================================================================
# Environment setup MUST happen before any application import
# Settings are read at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['STORE_BACKEND'] = 'memory'
    os.environ['CACHE_BACKEND'] = 'memory'
    os.environ.setdefault('SECRET_KEY', 'test_secret_key')


_early_setup_test_environment()

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from src.service.conference.app.command.conference_registry import (  # noqa: E402
    ConferenceRegistry,
)
from src.service.conference.app.command.profile_service import ProfileService  # noqa: E402
from src.service.conference.app.command.session_catalog import SessionCatalog  # noqa: E402
from src.service.conference.app.query.announcement_feed import AnnouncementFeed  # noqa: E402
from src.service.conference.domain.value_object.conference_form import (  # noqa: E402
    ConferenceForm,
)
from src.service.conference.domain.value_object.identity import Identity  # noqa: E402
from src.service.conference.domain.value_object.session_form import SessionForm  # noqa: E402
from src.service.conference.driven_adapter.cache.in_memory_cache import (  # noqa: E402
    InMemoryCache,
)
from src.service.conference.driven_adapter.notification.email_notification_dispatcher import (  # noqa: E402
    EmailNotificationDispatcher,
)
from src.service.conference.driven_adapter.notification.mock_email_sender import (  # noqa: E402
    MockEmailSender,
)
from src.service.conference.driven_adapter.store.in_memory_entity_store import (  # noqa: E402
    InMemoryEntityStore,
)


# =============================================================================
# Identities
# =============================================================================
@pytest.fixture
def organizer() -> Identity:
    return Identity(user_id='organizer-1', email='organizer@example.com')


@pytest.fixture
def attendee() -> Identity:
    return Identity(user_id='attendee-1', email='alice@example.com')


@pytest.fixture
def another_attendee() -> Identity:
    return Identity(user_id='attendee-2', email='bob@example.com')


# =============================================================================
# Adapters
# =============================================================================
@pytest.fixture
def entity_store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def email_sender() -> MockEmailSender:
    return MockEmailSender(sender='noreply@test.local')


# =============================================================================
# Services
# =============================================================================
@pytest.fixture
def profile_service(entity_store: InMemoryEntityStore) -> ProfileService:
    return ProfileService(entity_store=entity_store)


@pytest.fixture
def registry(
    entity_store: InMemoryEntityStore, email_sender: MockEmailSender
) -> ConferenceRegistry:
    return ConferenceRegistry(
        entity_store=entity_store,
        notification_dispatcher=EmailNotificationDispatcher(email_sender),
    )


@pytest.fixture
def catalog(entity_store: InMemoryEntityStore, cache: InMemoryCache) -> SessionCatalog:
    return SessionCatalog(entity_store=entity_store, cache=cache)


@pytest.fixture
def announcement_feed(cache: InMemoryCache) -> AnnouncementFeed:
    return AnnouncementFeed(cache=cache)


# =============================================================================
# Forms
# =============================================================================
@pytest.fixture
def conference_form() -> ConferenceForm:
    return ConferenceForm(
        name='PyCon',
        description='Python conference',
        topics=['Python', 'Web'],
        city='London',
        start_date=datetime(2026, 6, 10),
        end_date=datetime(2026, 6, 12),
        max_attendees=2,
    )


@pytest.fixture
def session_form() -> SessionForm:
    return SessionForm(
        name='Async in depth',
        highlights='asyncio',
        speaker='Guido',
        type_of_session='Workshop',
        start_time=9,
        date=datetime(2026, 6, 10),
        duration=90,
    )
