"""Conversation service API client.

Usage:
    from carechat.client import CareChatClient, UnauthorizedError

    async with CareChatClient(base_url="http://localhost:8000") as client:
        client.set_token(await client.login("alice", "pw1"))
        opening = await client.start_conversation()
        print(opening.greeting)
"""

from carechat.client.client import CareChatClient
from carechat.client.errors import (
    AuthError,
    CareChatClientError,
    NetworkError,
    ProtocolError,
    UnauthorizedError,
)
from carechat.client.models import StartResponse, StepResponse, StepState

__all__ = [
    "CareChatClient",
    "CareChatClientError",
    "AuthError",
    "NetworkError",
    "ProtocolError",
    "UnauthorizedError",
    "StartResponse",
    "StepResponse",
    "StepState",
]
