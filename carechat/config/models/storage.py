"""Token storage backend configuration models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "file", "redis"]


class StorageConfig(BaseModel):
    """Configuration for the durable key-value store that holds the token."""

    backend: BackendType = Field(default="file", description="Backend type")
    path: Path = Field(
        default=Path("~/.carechat/storage.json"),
        description="JSON file used by the file backend",
    )
    connection_url: str | None = Field(
        default=None,
        description="Redis connection URL for the redis backend",
    )
    key_prefix: str = Field(
        default="carechat",
        description="Key namespace for the redis backend",
    )
