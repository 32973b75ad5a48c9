"""KeyValueStore abstract interface."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract interface for durable string key-value storage.

    Backends raise StorageUnavailableError when the underlying storage
    cannot be reached; they never raise for a missing key.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get the value stored under key, or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key, returning whether it existed."""
        pass

    async def close(self) -> None:
        """Release connections held by the backend. No-op by default."""
        return None
