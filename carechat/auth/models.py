"""Authentication state models."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field


class AuthState(BaseModel):
    """Who is logged in, derived entirely from the bearer token."""

    model_config = ConfigDict(frozen=True)

    token: str | None = Field(default=None, description="Opaque bearer token")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_logged_in(self) -> bool:
        return self.token is not None


class Credentials(BaseModel):
    """Username and password for a single login attempt."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: SecretStr
