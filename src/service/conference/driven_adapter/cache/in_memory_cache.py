from typing import Dict, Optional

from src.service.conference.app.interface.i_cache import ICache


class InMemoryCache(ICache):
    """Process-local cache for tests and single-process runs."""

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value
