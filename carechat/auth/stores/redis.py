"""Redis implementation of KeyValueStore."""

import redis.asyncio as redis
from redis.exceptions import RedisError

from carechat.auth.errors import StorageUnavailableError
from carechat.auth.store import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed key-value store.

    Key structure:
    - {prefix}:{key} - one string value per key, no TTL
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "carechat") -> None:
        """Initialize the store.

        Args:
            client: Redis client instance
            key_prefix: Namespace prepended to every key
        """
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "carechat") -> "RedisKeyValueStore":
        """Create a store with its own client from a connection URL."""
        return cls(redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self._client.get(self._key(key))
        except RedisError as e:
            raise StorageUnavailableError(f"Redis get failed: {e}", key=key) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(self._key(key), value)
        except RedisError as e:
            raise StorageUnavailableError(f"Redis set failed: {e}", key=key) from e

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._client.delete(self._key(key))
        except RedisError as e:
            raise StorageUnavailableError(f"Redis delete failed: {e}", key=key) from e
        return bool(removed)

    async def close(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()
