"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from carechat.config import get_settings, reload_settings
from carechat.config.settings import Settings

SERVICE = {"base_url": "http://care.test"}


class TestSettings:
    """Tests for Settings model."""

    def test_service_is_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a base URL from any source, settings do not validate."""
        monkeypatch.delenv("CARECHAT_SERVICE__BASE_URL", raising=False)
        with pytest.raises(ValidationError):
            Settings()

    def test_defaults(self) -> None:
        """Everything except the service URL has a default."""
        settings = Settings(service=SERVICE)
        assert settings.service.timeout_seconds == 30.0
        assert settings.service.default_username is None
        assert settings.storage.backend == "file"
        assert settings.auth.token_key == "token"
        assert settings.session.staged_delay_seconds == 2.0
        assert settings.observability.logging.level == "INFO"
        assert settings.observability.logging.redact_pii is True

    def test_base_url_trailing_slash_stripped(self) -> None:
        settings = Settings(service={"base_url": "http://care.test/api/"})
        assert settings.service.base_url == "http://care.test/api"

    def test_blank_base_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(service={"base_url": "  "})

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(service=SERVICE, session={"staged_delay_seconds": -1})

    def test_default_password_is_secret(self) -> None:
        """Pre-fill password never shows up in reprs."""
        settings = Settings(
            service={**SERVICE, "default_username": "alice", "default_password": "pw1"}
        )
        assert settings.service.default_password is not None
        assert settings.service.default_password.get_secret_value() == "pw1"
        assert "pw1" not in repr(settings)

    def test_env_overrides(self, env_override) -> None:
        """CARECHAT_* variables with __ reach nested sections."""
        with env_override({
            "CARECHAT_SERVICE__BASE_URL": "http://from-env",
            "CARECHAT_SESSION__STAGED_DELAY_SECONDS": "0.5",
            "CARECHAT_STORAGE__BACKEND": "inmemory",
        }):
            settings = Settings()
        assert settings.service.base_url == "http://from-env"
        assert settings.session.staged_delay_seconds == 0.5
        assert settings.storage.backend == "inmemory"


class TestGetSettings:
    """Tests for get_settings function."""

    def _write_config(self, tmp_path: Path, content: str) -> Path:
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "default.toml").write_text(content)
        return config_dir

    def test_reads_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_dir = self._write_config(
            tmp_path,
            '[service]\nbase_url = "http://toml"\ntimeout_seconds = 9.0\n'
            "[session]\nstaged_delay_seconds = 0.25",
        )
        monkeypatch.setenv("CARECHAT_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("CARECHAT_ENV", "nonexistent")

        settings = get_settings()
        assert settings.service.timeout_seconds == 9.0
        assert settings.service.base_url == "http://toml"
        assert settings.session.staged_delay_seconds == 0.25

    def test_unknown_top_level_keys_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Keys with no settings field, such as a stale app_name, are dropped."""
        config_dir = self._write_config(
            tmp_path, 'app_name = "ward-7"\ndebug = true\n[service]\nbase_url = "http://toml"'
        )
        monkeypatch.setenv("CARECHAT_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("CARECHAT_ENV", "nonexistent")

        settings = get_settings()
        assert not hasattr(settings, "app_name")
        assert not hasattr(settings, "debug")

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_dir = self._write_config(tmp_path, '[service]\nbase_url = "http://toml"')
        monkeypatch.setenv("CARECHAT_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("CARECHAT_ENV", "nonexistent")
        monkeypatch.setenv("CARECHAT_SERVICE__BASE_URL", "http://env")

        assert get_settings().service.base_url == "http://env"

    def test_cached_until_reload(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_dir = self._write_config(tmp_path, '[service]\nbase_url = "http://one"')
        monkeypatch.setenv("CARECHAT_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("CARECHAT_ENV", "nonexistent")

        first = get_settings()
        assert get_settings() is first

        (config_dir / "default.toml").write_text('[service]\nbase_url = "http://two"')
        reloaded = reload_settings()
        assert reloaded is not first
        assert reloaded.service.base_url == "http://two"
