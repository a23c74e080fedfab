from abc import ABC, abstractmethod
from typing import Optional


class ICache(ABC):
    """Side cache for short strings. No expiry, no read-through population."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass
