"""Authentication: bearer token lifecycle and its durable storage."""

from carechat.auth.errors import StorageError, StorageUnavailableError
from carechat.auth.models import AuthState, Credentials
from carechat.auth.store import KeyValueStore
from carechat.auth.stores import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    create_key_value_store,
)
from carechat.auth.token_store import TokenStore

__all__ = [
    "AuthState",
    "Credentials",
    "KeyValueStore",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "StorageError",
    "StorageUnavailableError",
    "TokenStore",
    "create_key_value_store",
]
