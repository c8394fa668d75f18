"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from doseguide.config import Settings, get_settings


def test_settings_loads_defaults(monkeypatch):
    """Test that settings load with default values."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    # Clear cached settings
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.openai_api_key.get_secret_value() == "test-key"
    assert settings.extractor_model == "gpt-4.1-mini"
    assert settings.composer_provider == "openai"
    assert settings.oracle_timeout_seconds == 45.0
    assert settings.vectorstores_path == Path("vectorstores.json")
    assert settings.default_language == "auto"
    assert settings.is_development

    get_settings.cache_clear()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("COMPOSER_PROVIDER", "anthropic")
    monkeypatch.setenv("ORACLE_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert settings.composer_provider == "anthropic"
    assert settings.oracle_timeout_seconds == 12.5
    assert not settings.is_development


def test_openai_key_is_required(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("ORACLE_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
