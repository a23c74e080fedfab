from typing import Callable, Optional

from redis.asyncio import Redis

from src.platform.logging.loguru_io import Logger
from src.service.conference.app.interface.i_cache import ICache


class KvrocksCache(ICache):
    """
    Cache slots stored in Kvrocks.

    The client is resolved per call so the container can be built before
    kvrocks_client.initialize() runs in the app lifespan.
    """

    def __init__(self, *, client_factory: Callable[[], Redis], key_prefix: str = '') -> None:
        self._client_factory = client_factory
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f'{self._key_prefix}{key}'

    @Logger.io
    async def get(self, key: str) -> Optional[str]:
        value = await self._client_factory().get(self._key(key))
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else str(value)

    @Logger.io
    async def set(self, key: str, value: str) -> None:
        await self._client_factory().set(self._key(key), value)
