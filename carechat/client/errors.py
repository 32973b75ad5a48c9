"""Client exception hierarchy.

Every failure the transport can produce is one of these, so callers
classify errors by type rather than by inspecting HTTP details.
"""

from typing import Any


class CareChatClientError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class AuthError(CareChatClientError):
    """Raised when login is refused, typically for bad credentials.

    The message is the server's detail when one was given and is safe to
    show to the user verbatim.
    """


class UnauthorizedError(CareChatClientError):
    """Raised when the service rejects the bearer token mid-session."""


class NetworkError(CareChatClientError):
    """Raised for connectivity failures and non-auth HTTP errors.

    Retryable by resubmitting; the client never retries on its own.
    """


class ProtocolError(NetworkError):
    """Raised when a response does not have the expected shape."""
