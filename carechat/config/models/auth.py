"""Token handling configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """Bearer token persistence settings."""

    token_key: str = Field(
        default="token",
        min_length=1,
        description="Well-known storage key for the bearer token",
    )
