"""Conversation service connection configuration."""

from pydantic import BaseModel, Field, SecretStr, field_validator


class ServiceConfig(BaseModel):
    """Where the conversation service lives and how to talk to it.

    The default credentials only pre-fill the login intent for test and
    development setups. They grant nothing on their own.
    """

    base_url: str = Field(..., description="Base URL of the conversation service")
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Transport timeout for each request",
    )
    default_username: str | None = Field(
        default=None,
        description="Pre-filled username for the login intent",
    )
    default_password: SecretStr | None = Field(
        default=None,
        description="Pre-filled password for the login intent",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must not be empty")
        return value
