import logging

from creditsafe.enums import Environment
from creditsafe.settings import CreditsafeSettings, GeneralSettings, LogSettings


def test_client_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CS_ENVIRONMENT", "live")
    monkeypatch.setenv("CS_USERNAME", "api-user")
    monkeypatch.setenv("CS_PASSWORD", "api-pass")
    monkeypatch.setenv("CS_TIMEOUT", "15")

    settings = CreditsafeSettings()
    assert settings.environment is Environment.LIVE
    assert settings.username == "api-user"
    assert settings.password.get_secret_value() == "api-pass"
    assert settings.timeout == 15
    assert settings.operation_timeout is None


def test_password_is_masked(monkeypatch) -> None:
    monkeypatch.setenv("CS_PASSWORD", "api-pass")
    assert "api-pass" not in repr(CreditsafeSettings())


def test_client_settings_defaults(monkeypatch) -> None:
    for key in ("CS_ENVIRONMENT", "CS_USERNAME", "CS_PASSWORD", "CS_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    settings = CreditsafeSettings()
    assert settings.environment is Environment.TEST
    assert settings.username is None
    assert settings.timeout == 30


def test_log_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("CS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CS_LOG_FILE", raising=False)
    settings = LogSettings()
    assert settings.log_level == logging.INFO
    assert settings.log_file is None


def test_general_settings_aggregates() -> None:
    settings = GeneralSettings()
    assert isinstance(settings.client, CreditsafeSettings)
    assert isinstance(settings.log_settings, LogSettings)
