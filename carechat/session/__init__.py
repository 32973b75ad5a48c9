"""Conversation session: state machine, transitions and staged delivery."""

from carechat.client.models import StepState
from carechat.session.controller import SessionController
from carechat.session.factory import build_controller
from carechat.session.models import (
    ControllerSnapshot,
    Message,
    Notice,
    NoticeKind,
    Sender,
    SessionState,
)
from carechat.session.timer import StagedTimer
from carechat.session.transitions import InvalidTransitionError

__all__ = [
    "ControllerSnapshot",
    "InvalidTransitionError",
    "Message",
    "Notice",
    "NoticeKind",
    "Sender",
    "SessionController",
    "SessionState",
    "StagedTimer",
    "StepState",
    "build_controller",
]
