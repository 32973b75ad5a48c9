"""Wire models for the conversation service API."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StepState(str, Enum):
    """Conversation phase declared by the service."""

    INITIAL = "initial"
    NHS_ID = "nhs_id"
    OPTIONS = "options"
    ANALYSIS = "analysis"
    END = "end"


class TokenResponse(BaseModel):
    """Body of a successful POST /token."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)


class StartResponse(BaseModel):
    """Body of GET /start: the two-part opening of a conversation."""

    model_config = ConfigDict(extra="ignore")

    message: list[str] = Field(
        ..., min_length=2, description="Greeting, then follow-up; later entries are unused"
    )

    @property
    def greeting(self) -> str:
        return self.message[0]

    @property
    def follow_up(self) -> str:
        return self.message[1]


class BindRequest(BaseModel):
    """Body of POST /start-conversation."""

    nhs_id: str = Field(..., min_length=1)


class PromptRequest(BaseModel):
    """Body of POST /process-prompt."""

    nhs_id: str = Field(..., min_length=1)
    prompt: str


class StepResponse(BaseModel):
    """Reply to a bind or prompt call.

    Which text fields are present depends on the declared step; any of
    them may be missing.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    step: StepState
    message: str | None = None
    analysis_result: str | None = None
    continue_question: str | None = None
