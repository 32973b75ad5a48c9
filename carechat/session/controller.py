"""Session controller: the conversation state machine.

Purpose: the single orchestration point for one logged-in user. Owns the
step, the subject binding and the transcript; turns presenter intents
(login, start, submit, logout, restart) into service calls and the
service's replies into state changes.

Concurrency: one intent at a time, guarded by the loading flag. Every
reset bumps a generation counter; a service reply or staged delivery
that resumes under a different generation is discarded, so nothing is
ever written into a transcript that belongs to an earlier session.

Errors: transport failures never escape an intent. A rejected token
hard-resets the controller and raises a session-expired notice; any other
failure appends an apology to the transcript and leaves step and binding
untouched so the user can retry.
"""

from collections.abc import Callable

from carechat.auth.models import Credentials
from carechat.auth.token_store import TokenStore
from carechat.client.client import CareChatClient
from carechat.client.errors import (
    AuthError,
    CareChatClientError,
    ProtocolError,
    UnauthorizedError,
)
from carechat.client.models import StepResponse, StepState
from carechat.observability.logging import get_logger
from carechat.session import transitions
from carechat.session.models import (
    SUBMIT_STEPS,
    ControllerSnapshot,
    Message,
    Notice,
    NoticeKind,
    SessionState,
)
from carechat.session.timer import StagedTimer

logger = get_logger(__name__)

START_ERROR_TEXT = "Sorry, there was an error starting the conversation."
SUBMIT_ERROR_TEXT = "Sorry, there was an error processing your request."
SESSION_EXPIRED_TEXT = "Session expired. Please login again."
LOGIN_FAILED_TEXT = "Login failed: {detail}"
LOGIN_FAILED_DEFAULT = "Please check your credentials."

SnapshotListener = Callable[[ControllerSnapshot], None]
NoticeListener = Callable[[Notice], None]


class SessionController:
    """Drives one conversation session against the service."""

    def __init__(
        self,
        client: CareChatClient,
        token_store: TokenStore,
        *,
        staged_delay_seconds: float = 2.0,
        prefill: Credentials | None = None,
        timer: StagedTimer | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            client: Transport for the conversation service
            token_store: Owner of the bearer token
            staged_delay_seconds: Pause between greeting and follow-up
            prefill: Default credentials offered to the login intent
            timer: Timer used for staged delivery
        """
        self._client = client
        self._token_store = token_store
        self._staged_delay = staged_delay_seconds
        self._prefill = prefill
        self._timer = timer or StagedTimer()

        self._state = transitions.initial_state()
        self._loading = False
        self._generation = 0
        self._snapshot_listeners: list[SnapshotListener] = []
        self._notice_listeners: list[NoticeListener] = []

    # State

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def step(self) -> StepState:
        return self._state.step

    @property
    def session_id(self) -> str | None:
        return self._state.session_id

    @property
    def transcript(self) -> tuple[Message, ...]:
        return self._state.transcript

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_logged_in(self) -> bool:
        return self._token_store.is_logged_in

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def prefill(self) -> Credentials | None:
        """Credentials to pre-fill a login form with, until a login succeeds."""
        return self._prefill

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            step=self._state.step,
            session_id=self._state.session_id,
            transcript=self._state.transcript,
            is_logged_in=self.is_logged_in,
            loading=self._loading,
        )

    # Subscriptions

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call listener with a fresh snapshot after every change.

        Returns:
            A callable that removes the listener
        """
        self._snapshot_listeners.append(listener)
        return lambda: self._remove(self._snapshot_listeners, listener)

    def on_notice(self, listener: NoticeListener) -> Callable[[], None]:
        """Call listener with every alert-style notice."""
        self._notice_listeners.append(listener)
        return lambda: self._remove(self._notice_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._snapshot_listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("snapshot_listener_failed")

    def _emit(self, kind: NoticeKind, text: str) -> None:
        notice = Notice(kind=kind, text=text)
        for listener in list(self._notice_listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("notice_listener_failed", kind=kind.value)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._notify()

    def _is_stale(self, generation: int, operation: str) -> bool:
        if generation == self._generation:
            return False
        logger.debug("stale_result_discarded", operation=operation)
        return True

    def _ignore(self, intent: str, reason: str) -> bool:
        logger.debug("intent_ignored", intent=intent, reason=reason)
        return False

    def _log_failure(self, operation: str, error: CareChatClientError) -> None:
        if isinstance(error, ProtocolError):
            logger.error(
                "protocol_error",
                operation=operation,
                error=error.message,
                status_code=error.status_code,
                details=error.details,
            )
        else:
            logger.warning(
                f"{operation}_failed",
                error=error.message,
                status_code=error.status_code,
            )

    # Intents

    async def restore(self) -> bool:
        """Pick up a token persisted by an earlier run.

        Returns:
            Whether the user is now logged in
        """
        token = await self._token_store.load()
        self._client.set_token(token)
        logger.info("token_restored", logged_in=token is not None)
        self._notify()
        return token is not None

    async def login(self, username: str | None = None, password: str | None = None) -> bool:
        """Log in with the given credentials, or the pre-filled ones.

        Pre-filled credentials are used only when neither argument is given.

        Returns:
            Whether the login succeeded
        """
        if self._loading:
            return self._ignore("login", "busy")

        if username is None and password is None and self._prefill is not None:
            username = self._prefill.username
            password = self._prefill.password.get_secret_value()
        if not username or not password:
            self._emit(
                NoticeKind.LOGIN_FAILED,
                LOGIN_FAILED_TEXT.format(detail=LOGIN_FAILED_DEFAULT),
            )
            return False

        generation = self._generation
        self._set_loading(True)
        try:
            token = await self._client.login(username, password)
        except AuthError as e:
            if self._is_stale(generation, "login"):
                return False
            logger.info("login_rejected", status_code=e.status_code)
            self._set_loading(False)
            self._emit(NoticeKind.LOGIN_FAILED, LOGIN_FAILED_TEXT.format(detail=e.message))
            return False
        except CareChatClientError as e:
            if self._is_stale(generation, "login"):
                return False
            self._log_failure("login", e)
            self._set_loading(False)
            self._emit(
                NoticeKind.LOGIN_FAILED,
                LOGIN_FAILED_TEXT.format(detail=LOGIN_FAILED_DEFAULT),
            )
            return False

        if self._is_stale(generation, "login"):
            return False

        self._client.set_token(token)
        await self._token_store.save(token)
        if self._is_stale(generation, "login"):
            # logged out while the token was being written
            await self._token_store.clear()
            return False

        self._prefill = None

        logger.info("login_succeeded")
        self._set_loading(False)
        return True

    async def logout(self) -> None:
        """Forget the token and the conversation. Never fails."""
        await self._reset()
        logger.info("logged_out")

    async def _reset(self) -> None:
        self._generation += 1
        self._timer.cancel()
        self._state = transitions.initial_state()
        self._loading = False
        self._client.set_token(None)
        await self._token_store.clear()
        self._notify()

    async def _expire(self, operation: str) -> None:
        logger.warning("session_expired", operation=operation)
        await self._reset()
        self._emit(NoticeKind.SESSION_EXPIRED, SESSION_EXPIRED_TEXT)

    async def start(self) -> bool:
        """Open a conversation: greeting now, follow-up after the staged delay.

        Returns:
            Whether the opening was received (the follow-up may still be pending)
        """
        if self._loading:
            return self._ignore("start", "busy")
        if not self.is_logged_in:
            return self._ignore("start", "logged_out")
        if self._state.step != StepState.INITIAL:
            return self._ignore("start", self._state.step.value)

        generation = self._generation
        self._set_loading(True)
        try:
            opening = await self._client.start_conversation()
        except UnauthorizedError:
            if not self._is_stale(generation, "start"):
                await self._expire("start")
            return False
        except CareChatClientError as e:
            if self._is_stale(generation, "start"):
                return False
            self._log_failure("start", e)
            self._state = transitions.append_bot(self._state, START_ERROR_TEXT)
            self._set_loading(False)
            return False

        if self._is_stale(generation, "start"):
            return False

        # loading stays set until the follow-up is delivered
        self._state = transitions.begin_start(self._state, opening.greeting)
        self._notify()
        self._timer.schedule(
            self._staged_delay,
            lambda: self._deliver_follow_up(generation, opening.follow_up),
        )
        logger.info("conversation_started", staged_delay_seconds=self._staged_delay)
        return True

    def _deliver_follow_up(self, generation: int, follow_up: str) -> None:
        if self._is_stale(generation, "staged_delivery"):
            return
        self._state = transitions.complete_start(self._state, follow_up)
        self._set_loading(False)

    async def submit(self, text: str) -> bool:
        """Send the user's text: a subject identifier in nhs_id, a prompt after.

        Returns:
            Whether the service accepted the submission
        """
        if self._loading:
            return self._ignore("submit", "busy")
        if not self.is_logged_in:
            return self._ignore("submit", "logged_out")

        text = text.strip()
        if not text:
            return self._ignore("submit", "empty")

        step = self._state.step
        if step not in SUBMIT_STEPS:
            return self._ignore("submit", step.value)

        generation = self._generation
        operation = "bind" if step == StepState.NHS_ID else "prompt"
        self._loading = True
        self._state = transitions.append_user(self._state, text)
        self._notify()

        try:
            response = await self._send(step, text)
        except UnauthorizedError:
            if not self._is_stale(generation, operation):
                await self._expire(operation)
            return False
        except CareChatClientError as e:
            if self._is_stale(generation, operation):
                return False
            self._log_failure(operation, e)
            self._state = transitions.append_bot(self._state, SUBMIT_ERROR_TEXT)
            self._set_loading(False)
            return False

        if self._is_stale(generation, operation):
            return False

        if step == StepState.NHS_ID:
            self._state = transitions.bind_session(self._state, text)
        self._state = transitions.apply_step_response(self._state, response)
        logger.info("step_changed", operation=operation, step=response.step.value)
        self._set_loading(False)
        return True

    async def _send(self, step: StepState, text: str) -> StepResponse:
        if step == StepState.NHS_ID:
            return await self._client.bind_subject(text)
        session_id = self._state.session_id
        if session_id is None:
            raise CareChatClientError(f"No subject bound in step {step.value!r}")
        return await self._client.send_prompt(session_id, text)

    async def restart(self) -> bool:
        """After the conversation ended, clear it so a new one can start."""
        if self._loading:
            return self._ignore("restart", "busy")
        if self._state.step != StepState.END:
            return self._ignore("restart", self._state.step.value)

        self._generation += 1
        self._state = transitions.initial_state()
        logger.info("conversation_restarted")
        self._notify()
        return True

    async def wait_until_idle(self) -> None:
        """Wait for any pending staged delivery to land or be cancelled."""
        await self._timer.wait()

    async def close(self) -> None:
        """Cancel pending work, then close the transport and token storage."""
        self._timer.cancel()
        await self._client.close()
        await self._token_store.close()
