"""Tests for the configuration module."""

import os
from unittest import mock

import pytest
from pydantic import ValidationError

from keyenv.utils.config import DEFAULT_BASE_URL, Settings, normalize_api_url


def test_settings_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.api_url == DEFAULT_BASE_URL
    assert settings.timeout == 30
    assert settings.cache_ttl == 0
    assert settings.token is None
    assert settings.log_level == "INFO"


def test_settings_loading():
    """Settings are read from KEYENV_* variables."""
    env_vars = {
        "KEYENV_API_URL": "http://localhost:8081/",
        "KEYENV_TIMEOUT": "5",
        "KEYENV_CACHE_TTL": "300",
        "KEYENV_TOKEN": "env_test_integration_token_12345",
    }
    with mock.patch.dict(os.environ, env_vars, clear=True):
        settings = Settings(_env_file=None)

    assert settings.api_url == "http://localhost:8081"
    assert settings.timeout == 5
    assert settings.cache_ttl == 300
    assert settings.token.get_secret_value() == "env_test_integration_token_12345"
    assert "env_test_integration_token_12345" not in repr(settings)


@pytest.mark.parametrize("raw, expected", [("abc", 0), ("-5", 0), ("", 0), (" 42 ", 42)])
def test_cache_ttl_coercion(raw, expected):
    with mock.patch.dict(os.environ, {"KEYENV_CACHE_TTL": raw}, clear=True):
        assert Settings(_env_file=None).cache_ttl == expected


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("KEYENV_CACHE_TTL=60\nUNRELATED=1\n")
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=str(env_file))

    assert settings.cache_ttl == 60


def test_api_url_requires_scheme():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, api_url="api.keyenv.dev")


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, timeout=0)


def test_normalize_api_url():
    assert normalize_api_url(" https://api.keyenv.dev// ") == "https://api.keyenv.dev"
    with pytest.raises(ValueError):
        normalize_api_url("ftp://api.keyenv.dev")
