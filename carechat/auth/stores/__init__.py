"""Key-value stores for token persistence."""

from carechat.auth.store import KeyValueStore
from carechat.auth.stores.file import FileKeyValueStore
from carechat.auth.stores.inmemory import InMemoryKeyValueStore
from carechat.auth.stores.redis import RedisKeyValueStore
from carechat.config.models.storage import StorageConfig


def create_key_value_store(config: StorageConfig) -> KeyValueStore:
    """Build the backend selected by config.backend."""
    if config.backend == "inmemory":
        return InMemoryKeyValueStore()
    if config.backend == "file":
        return FileKeyValueStore(config.path)
    if config.backend == "redis":
        if not config.connection_url:
            raise ValueError("storage.connection_url is required for the redis backend")
        return RedisKeyValueStore.from_url(
            config.connection_url, key_prefix=config.key_prefix
        )
    raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_key_value_store",
]
