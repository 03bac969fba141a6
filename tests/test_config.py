"""Tests for application settings."""

import pytest

from rawej_booking.core.config import PROJECT_ROOT, Settings
from rawej_booking.utils.errors import ConfigError


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.api_cache_revalidate == 300
    assert settings.enable_mock_fallback is False
    assert settings.session_cookie_name == "auth-session"
    assert settings.token_file is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("REMOTE_API_URL", "https://api.rawej.test/")
    monkeypatch.setenv("ENABLE_MOCK_FALLBACK", "true")
    monkeypatch.setenv("API_CACHE_REVALIDATE", "60")

    settings = Settings(_env_file=None)

    assert settings.require_remote_api_url() == "https://api.rawej.test"
    assert settings.enable_mock_fallback is True
    assert settings.api_cache_revalidate == 60


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_remote_url_is_config_error(value):
    with pytest.raises(ConfigError, match="REMOTE_API_URL"):
        Settings(_env_file=None, remote_api_url=value).require_remote_api_url()


def test_resolve_locale():
    settings = Settings(_env_file=None)

    assert settings.resolve_locale("fa") == "fa"
    assert settings.resolve_locale("ku-sor") == "ku-sor"
    assert settings.resolve_locale("xx") == "en"
    assert settings.resolve_locale(None) == "en"


def test_relative_token_file_resolves_against_project_root():
    settings = Settings(_env_file=None, token_file_path="storage/tokens/auth.json")

    assert settings.token_file == PROJECT_ROOT / "storage/tokens/auth.json"
