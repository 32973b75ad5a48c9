"""Bearer token lifecycle on top of a KeyValueStore.

The token is always held in memory. Persistence is best effort: if the
backing store is unavailable the token keeps working for the lifetime of
the process and is simply not there after a restart.
"""

from carechat.auth.errors import StorageUnavailableError
from carechat.auth.models import AuthState
from carechat.auth.store import KeyValueStore
from carechat.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOKEN_KEY = "token"


class TokenStore:
    """Owns the bearer token: load on start, save on login, clear on logout.

    Token contents are never inspected.
    """

    def __init__(self, storage: KeyValueStore, key: str = DEFAULT_TOKEN_KEY) -> None:
        """Initialize the token store.

        Args:
            storage: Durable key-value backend
            key: Well-known key the token is stored under
        """
        self._storage = storage
        self._key = key
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_logged_in(self) -> bool:
        return self._token is not None

    def state(self) -> AuthState:
        return AuthState(token=self._token)

    async def load(self) -> str | None:
        """Load the persisted token into memory and return it."""
        try:
            stored = await self._storage.get(self._key)
        except StorageUnavailableError as e:
            logger.warning("token_storage_unavailable", operation="load", error=e.message)
            return self._token

        self._token = stored
        logger.debug("token_loaded", found=stored is not None)
        return stored

    async def save(self, token: str) -> None:
        """Set the token, persisting it when storage allows."""
        self._token = token
        try:
            await self._storage.set(self._key, token)
        except StorageUnavailableError as e:
            logger.warning("token_storage_unavailable", operation="save", error=e.message)

    async def clear(self) -> None:
        """Forget the token in memory and in storage."""
        self._token = None
        try:
            await self._storage.delete(self._key)
        except StorageUnavailableError as e:
            logger.warning("token_storage_unavailable", operation="clear", error=e.message)

    async def close(self) -> None:
        """Close the backing store."""
        await self._storage.close()
