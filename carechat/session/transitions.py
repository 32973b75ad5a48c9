"""Pure state transitions for a conversation session.

Each function takes the current SessionState and returns the next one.
No I/O happens here; the controller performs the service calls and feeds
their results in.
"""

from carechat.client.models import StepResponse, StepState
from carechat.session.models import BOUND_STEPS, Message, Sender, SessionState


class InvalidTransitionError(ValueError):
    """Raised when a transition is applied in a step that does not allow it."""

    def __init__(self, transition: str, step: StepState) -> None:
        self.transition = transition
        self.step = step
        super().__init__(f"Cannot {transition} in step {step.value!r}")


def initial_state() -> SessionState:
    """The state after login, logout or a hard reset."""
    return SessionState()


def append(state: SessionState, *messages: Message) -> SessionState:
    """Append messages to the transcript in the given order."""
    if not messages:
        return state
    return state.model_copy(update={"transcript": state.transcript + messages})


def append_bot(state: SessionState, text: str) -> SessionState:
    return append(state, Message(sender=Sender.BOT, text=text))


def append_user(state: SessionState, text: str) -> SessionState:
    return append(state, Message(sender=Sender.USER, text=text))


def begin_start(state: SessionState, greeting: str) -> SessionState:
    """Show the greeting; the step stays initial until the follow-up lands."""
    if state.step != StepState.INITIAL:
        raise InvalidTransitionError("start", state.step)
    return append_bot(state, greeting)


def complete_start(state: SessionState, follow_up: str) -> SessionState:
    """Show the follow-up question and ask for the subject identifier."""
    if state.step != StepState.INITIAL:
        raise InvalidTransitionError("complete start", state.step)
    return append_bot(state, follow_up).model_copy(update={"step": StepState.NHS_ID})


def bind_session(state: SessionState, subject_id: str) -> SessionState:
    """Record the subject identifier the service accepted."""
    if state.step != StepState.NHS_ID:
        raise InvalidTransitionError("bind subject", state.step)
    return state.model_copy(update={"session_id": subject_id})


def apply_step_response(state: SessionState, response: StepResponse) -> SessionState:
    """Apply a bind or prompt reply.

    options  -> message
    analysis -> analysis_result, then continue_question
    end      -> message, and the subject binding is dropped

    The declared step always becomes the new step. The binding survives
    only into steps that expect further prompts for the same subject.
    """
    if response.step == StepState.ANALYSIS:
        texts = [response.analysis_result, response.continue_question]
    elif response.step in (StepState.OPTIONS, StepState.END):
        texts = [response.message]
    else:
        texts = []

    state = append(
        state,
        *(Message(sender=Sender.BOT, text=text) for text in texts if text),
    )

    session_id = state.session_id if response.step in BOUND_STEPS else None
    return state.model_copy(update={"step": response.step, "session_id": session_id})
