"""Unit tests for application settings configuration."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from walkin.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_defaults_verify_signatures_and_store_details(monkeypatch):
    for name in ("TOKEN_VERIFY_SIGNATURE", "RECORD_UPDATE_STYLE", "DEFAULT_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.token_verify_signature is True
    assert settings.record_update_style == "details"
    assert settings.default_page_size == 10
    assert settings.jwt_algorithms == ["HS256"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RECORD_UPDATE_STYLE", "audit_log")
    monkeypatch.setenv("TOKEN_VERIFY_SIGNATURE", "false")
    monkeypatch.setenv("MEDIA_ROOT", "/srv/walkin/media")

    settings = Settings(_env_file=None)

    assert settings.record_update_style == "audit_log"
    assert settings.token_verify_signature is False
    assert settings.media_root == "/srv/walkin/media"


def test_unknown_update_style_is_rejected(monkeypatch):
    monkeypatch.setenv("RECORD_UPDATE_STYLE", "overwrite")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_default_secret_outside_development_warns(monkeypatch, caplog):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with caplog.at_level(logging.WARNING, logger="walkin.config"):
        Settings(_env_file=None, app_env="production")
    assert "JWT_SECRET" in caplog.text
