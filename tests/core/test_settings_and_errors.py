"""Tests for configuration loading and the error hierarchy."""

import pytest
from pydantic import ValidationError

from runplanner.config.settings import Settings
from runplanner.core.errors import BatchValidationError, InvalidInputError, RunPlannerError


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "30")

    config = Settings(_env_file=None)

    assert config.database_url == "sqlite:///:memory:"
    assert config.generation_enabled is True
    assert config.generation_timeout_seconds == 30


def test_invalid_log_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert Settings(_env_file=None).log_level == "INFO"


def test_log_level_is_uppercased(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_timeout_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_batch_error_is_invalid_input() -> None:
    error = BatchValidationError(3, "invalid run type")

    assert isinstance(error, InvalidInputError)
    assert isinstance(error, RunPlannerError)
    assert str(error) == "workout[3]: invalid run type"
