"""Conversation service API client.

Provides an async client for the care home conversation service.

Usage:
    from carechat.client import CareChatClient

    async with CareChatClient(base_url="https://care.example.org") as client:
        token = await client.login("alice", "pw1")
        client.set_token(token)
        opening = await client.start_conversation()
        reply = await client.bind_subject("4857773456")
"""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from carechat.client.errors import (
    AuthError,
    NetworkError,
    ProtocolError,
    UnauthorizedError,
)
from carechat.client.models import (
    BindRequest,
    PromptRequest,
    StartResponse,
    StepResponse,
    TokenResponse,
)
from carechat.config.models.service import ServiceConfig
from carechat.observability.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_LOGIN_FAILURE = "Please check your credentials."


class CareChatClient:
    """Async client for the conversation service.

    The bearer token belongs to this instance and is attached to every
    outgoing request while set. One instance serves one session.

    Attributes:
        base_url: Base URL of the conversation service
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the conversation service
            token: Bearer token, if already logged in
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "CareChatClient":
        """Create a client from the service section of the settings."""
        return cls(
            base_url=config.base_url,
            token=token,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "CareChatClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    @property
    def token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        """Replace (or with None, drop) the bearer token for later requests."""
        self._token = token

    def _headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, turning transport failures into NetworkError."""
        try:
            response = await self._client.request(
                method=method,
                url=path,
                headers=self._headers(),
                **kwargs,
            )
        except httpx.TransportError as e:
            logger.warning("http_transport_error", method=method, path=path, error=str(e))
            raise NetworkError(f"Cannot reach conversation service: {e}") from e

        logger.debug(
            "http_response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    @staticmethod
    def _error_detail(response: httpx.Response) -> str | None:
        """Extract the server's `detail` string from an error body, if any."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("detail"), str):
            return body["detail"]
        return None

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body or raise ProtocolError."""
        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(
                "Response body is not valid JSON",
                status_code=response.status_code,
                details=response.text[:200],
            ) from e
        if not isinstance(body, dict):
            raise ProtocolError(
                "Response body is not a JSON object",
                status_code=response.status_code,
                details=body,
            )
        return body

    @staticmethod
    def _parse(model: type[ModelT], data: dict[str, Any]) -> ModelT:
        """Validate a decoded body against a wire model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(
                f"Unexpected {model.__name__} shape",
                details=e.errors(include_url=False),
            ) from e

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated API request and classify failures."""
        response = await self._send(method, path, json=json)

        if response.status_code == 401:
            raise UnauthorizedError(
                self._error_detail(response) or "Token rejected",
                status_code=401,
            )

        if response.status_code >= 400:
            detail = self._error_detail(response)
            raise NetworkError(
                message=detail or f"Service returned HTTP {response.status_code}",
                status_code=response.status_code,
                details=detail,
            )

        return self._json(response)

    # Auth
    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for a bearer token.

        Credentials go out form-encoded and are never logged.

        Returns:
            The access token

        Raises:
            AuthError: The service refused the credentials (any 4xx)
            NetworkError: Connectivity failure or server error
        """
        response = await self._send(
            "POST",
            "/token",
            data={"username": username, "password": password},
        )

        if 400 <= response.status_code < 500:
            detail = self._error_detail(response)
            raise AuthError(
                detail or DEFAULT_LOGIN_FAILURE,
                status_code=response.status_code,
                details=detail,
            )
        if response.status_code >= 500:
            raise NetworkError(
                f"Service returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return self._parse(TokenResponse, self._json(response)).access_token

    # Conversation
    async def start_conversation(self) -> StartResponse:
        """Fetch the greeting and follow-up that open a conversation."""
        data = await self._request("GET", "/start")
        return self._parse(StartResponse, data)

    async def bind_subject(self, subject_id: str) -> StepResponse:
        """Begin a session keyed by the subject identifier.

        The service does not demand a token for this call, so none is
        required here; the token is still sent when one is set.
        """
        payload = BindRequest(nhs_id=subject_id)
        data = await self._request(
            "POST",
            "/start-conversation",
            json=payload.model_dump(),
        )
        return self._parse(StepResponse, data)

    async def send_prompt(self, subject_id: str, prompt: str) -> StepResponse:
        """Send the user's reply within a bound session."""
        payload = PromptRequest(nhs_id=subject_id, prompt=prompt)
        data = await self._request(
            "POST",
            "/process-prompt",
            json=payload.model_dump(),
        )
        return self._parse(StepResponse, data)
