"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.conference.driven_adapter.cache.in_memory_cache import InMemoryCache
from src.service.conference.driven_adapter.cache.kvrocks_cache import KvrocksCache
from src.service.conference.driven_adapter.notification.email_notification_dispatcher import (
    EmailNotificationDispatcher,
)
from src.service.conference.driven_adapter.notification.mock_email_sender import MockEmailSender
from src.service.conference.driven_adapter.store.in_memory_entity_store import (
    InMemoryEntityStore,
)
from src.service.conference.driven_adapter.store.sqlalchemy_entity_store import (
    SqlAlchemyEntityStore,
)
from src.service.conference.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine is created lazily on first use)
    database = providers.Singleton(Database)

    # Entity store: STORE_BACKEND picks the implementation
    entity_store = providers.Selector(
        config_service.provided.STORE_BACKEND,
        memory=providers.Singleton(InMemoryEntityStore),
        sqlalchemy=providers.Singleton(SqlAlchemyEntityStore, database=database),
    )

    # Side cache: CACHE_BACKEND picks the implementation
    cache = providers.Selector(
        config_service.provided.CACHE_BACKEND,
        memory=providers.Singleton(InMemoryCache),
        kvrocks=providers.Singleton(
            KvrocksCache,
            client_factory=providers.Object(kvrocks_client.get_client),
            key_prefix=config_service.provided.KVROCKS_KEY_PREFIX,
        ),
    )

    # Notification (confirmation e-mail after conference creation)
    email_sender = providers.Singleton(
        MockEmailSender,
        sender=config_service.provided.NOTIFICATION_SENDER,
        echo=config_service.provided.NOTIFICATION_ECHO,
    )
    notification_dispatcher = providers.Singleton(
        EmailNotificationDispatcher, email_sender=email_sender
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()


def cleanup() -> None:
    container.reset_singletons()
