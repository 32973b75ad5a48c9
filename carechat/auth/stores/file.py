"""JSON file implementation of KeyValueStore.

All keys live in a single JSON object on disk. Writes go to a temporary
file in the same directory which then replaces the original, so a crash
mid-write never leaves a truncated document behind.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from carechat.auth.errors import StorageUnavailableError
from carechat.auth.store import KeyValueStore
from carechat.observability.logging import get_logger

logger = get_logger(__name__)


class FileKeyValueStore(KeyValueStore):
    """Durable key-value store backed by one JSON document."""

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document; "~" is expanded
        """
        self._path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageUnavailableError(
                f"Cannot read storage file {self._path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise StorageUnavailableError(
                f"Storage file {self._path} does not hold a JSON object"
            )
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot write storage file {self._path}: {e}"
            ) from e

    async def get(self, key: str) -> str | None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = value
            await asyncio.to_thread(self._write, data)
        logger.debug("storage_key_written", key=key, path=str(self._path))

    async def delete(self, key: str) -> bool:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if key not in data:
                return False
            del data[key]
            await asyncio.to_thread(self._write, data)
        logger.debug("storage_key_deleted", key=key, path=str(self._path))
        return True
