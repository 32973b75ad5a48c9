"""Conversation session configuration."""

from pydantic import BaseModel, Field


class SessionConfig(BaseModel):
    """Session controller behaviour."""

    staged_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause between the greeting and the follow-up question",
    )
