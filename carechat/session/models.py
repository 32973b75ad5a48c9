"""Session domain models.

Everything here is immutable: the controller replaces its state with a
new value on every transition instead of mutating it in place.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from carechat.client.models import StepState

# Steps in which the user's text is sent to the service
SUBMIT_STEPS: frozenset[StepState] = frozenset({
    StepState.NHS_ID,
    StepState.OPTIONS,
    StepState.ANALYSIS,
})

# Steps in which a subject is bound to the session
BOUND_STEPS: frozenset[StepState] = frozenset({
    StepState.OPTIONS,
    StepState.ANALYSIS,
})


class Sender(str, Enum):
    """Who produced a transcript message."""

    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """One transcript entry."""

    model_config = ConfigDict(frozen=True)

    sender: Sender
    text: str


class SessionState(BaseModel):
    """Step, subject binding and transcript of the current conversation."""

    model_config = ConfigDict(frozen=True)

    session_id: str | None = Field(default=None, description="Bound subject identifier")
    step: StepState = Field(default=StepState.INITIAL, description="Current phase")
    transcript: tuple[Message, ...] = Field(
        default=(), description="Messages in production order"
    )


class NoticeKind(str, Enum):
    """Alert-style signals for the presenter."""

    SESSION_EXPIRED = "session_expired"
    LOGIN_FAILED = "login_failed"


class Notice(BaseModel):
    """An alert the presenter should show once."""

    model_config = ConfigDict(frozen=True)

    kind: NoticeKind
    text: str


class ControllerSnapshot(BaseModel):
    """Everything a presenter needs to render the controller."""

    model_config = ConfigDict(frozen=True)

    step: StepState
    session_id: str | None
    transcript: tuple[Message, ...]
    is_logged_in: bool
    loading: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def can_start(self) -> bool:
        return (
            self.is_logged_in
            and not self.loading
            and self.step == StepState.INITIAL
            and self.session_id is None
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def can_submit(self) -> bool:
        return self.is_logged_in and not self.loading and self.step in SUBMIT_STEPS

    @computed_field  # type: ignore[prop-decorator]
    @property
    def input_hint(self) -> str:
        if self.step == StepState.NHS_ID:
            return "Enter NHS ID..."
        return "Type your message..."
