"""Storage error hierarchy for token persistence."""


class StorageError(Exception):
    """Base exception for key-value storage failures."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.message = message
        self.key = key
        super().__init__(message)


class StorageUnavailableError(StorageError):
    """Raised when the backing store cannot be read or written."""
