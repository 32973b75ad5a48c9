"""Tests for structured logging."""

import json
from datetime import datetime

import pytest
import structlog

from carechat.observability.logging import (
    PIIRedactor,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Leave structlog unconfigured for the next test."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON format writes one parseable object per event to stderr."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("carechat.test").info("conversation_started", staged_delay_seconds=2.0)

        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "conversation_started"
        assert parsed["staged_delay_seconds"] == 2.0
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events below the configured level are dropped."""
        setup_logging(level="WARNING", format="json", redact_pii=False)
        logger = get_logger("carechat.test")
        logger.info("login_succeeded")
        logger.warning("session_expired", operation="prompt")

        lines = capsys.readouterr().err.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "session_expired"

    def test_console_format(self) -> None:
        """Console format can be configured and used."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("carechat.test").debug("intent_ignored", intent="submit")

    def test_redaction_in_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """With redaction on, credentials never reach the output."""
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("carechat.test").info(
            "debug_dump", username="alice", password="pw1", access_token="tok-abc"
        )

        output = capsys.readouterr().err
        assert "pw1" not in output
        assert "tok-abc" not in output
        assert "alice" not in output

    def test_timestamp_survives_redaction(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The ISO timestamp is not mistaken for a phone number."""
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("carechat.test").info("http_response", status_code=200)

        parsed = json.loads(capsys.readouterr().err.strip())
        assert "[PHONE]" not in parsed["timestamp"]
        datetime.fromisoformat(parsed["timestamp"].replace("Z", "+00:00"))
        assert parsed["level"] == "info"

    def test_context_vars_merged(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Context bound through contextvars appears on every event."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        structlog.contextvars.bind_contextvars(generation=3)
        get_logger("carechat.test").info("step_changed", step="options")

        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["generation"] == 3


class TestPIIRedactor:
    """Tests for PII redaction."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    @pytest.mark.parametrize(
        "key",
        ["password", "token", "access_token", "Authorization", "nhs_id", "session_id"],
    )
    def test_redacts_sensitive_keys(self, redactor: PIIRedactor, key: str) -> None:
        result = redactor(None, None, {key: "secret-value", "other": "ok"})  # type: ignore
        assert result[key] == "[REDACTED]"
        assert result["other"] == "ok"

    def test_redacts_bearer_in_string(self, redactor: PIIRedactor) -> None:
        result = redactor(None, None, {"error": "rejected Bearer tok-abc"})  # type: ignore
        assert "tok-abc" not in result["error"]
        assert "Bearer [REDACTED]" in result["error"]

    def test_redacts_nhs_number_shaped_digits(self, redactor: PIIRedactor) -> None:
        """Ten-digit identifiers in free text are masked like phone numbers."""
        result = redactor(None, None, {"error": "lookup 485 777 3456 failed"})  # type: ignore
        assert "485 777 3456" not in result["error"]

    def test_redacts_email_in_string(self, redactor: PIIRedactor) -> None:
        result = redactor(None, None, {"error": "no user carer@example.org"})  # type: ignore
        assert "[EMAIL]" in result["error"]

    def test_handles_nested_structures(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "request": {"password": "pw1", "path": "/token"},
            "notes": ["reach me at carer@example.org", {"token": "t"}],
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["request"] == {"password": "[REDACTED]", "path": "/token"}
        assert result["notes"][0] == "reach me at [EMAIL]"
        assert result["notes"][1] == {"token": "[REDACTED]"}

    def test_preserves_non_pii_data(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "event": "http_response",
            "method": "POST",
            "path": "/process-prompt",
            "status_code": 200,
        }
        assert redactor(None, None, event_dict) == event_dict  # type: ignore

    def test_passes_timestamp_through(self, redactor: PIIRedactor) -> None:
        event_dict = {"timestamp": "2026-10-19T13:03:20.393693Z", "level": "info"}
        assert redactor(None, None, event_dict) == event_dict  # type: ignore
