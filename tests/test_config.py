"""Tests for settings loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from contact_dashboard.config import ConfigError, Settings, load_settings


ENV_VARS = (
    "CONTACTS_API_URL",
    "CONTACTS_API_TOKEN",
    "CONTACTS_TIMEOUT_SECONDS",
    "CONTACTS_ENV",
    "CONTACTS_DOWNLOAD_DIR",
    "CONTACTS_NOTIFICATION_TTL",
    "CONTACTS_ALLOWED_FRONTEND",
    "CONTACTS_CONFIG",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no CONTACTS_* variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _load(tmp_path: Path, **kwargs) -> Settings:
    return load_settings(env_file=tmp_path / "missing.env", **kwargs)


class TestLoadSettings:

    def test_defaults(self, clean_env):
        settings = _load(clean_env)
        assert settings.api_base_url == "http://localhost:8081"
        assert settings.api_token is None
        assert settings.timeout_seconds == 15.0
        assert settings.notification_ttl_seconds == 5.0
        assert "http://localhost:5173" in settings.allowed_origins

    def test_env_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("CONTACTS_API_URL", "https://contacts.example.com/")
        monkeypatch.setenv("CONTACTS_API_TOKEN", "tok")
        monkeypatch.setenv("CONTACTS_TIMEOUT_SECONDS", "3.5")
        monkeypatch.setenv("CONTACTS_ENV", "staging")
        monkeypatch.setenv("CONTACTS_ALLOWED_FRONTEND", "https://app.example.com")

        settings = _load(clean_env)

        assert settings.api_base_url == "https://contacts.example.com"
        assert settings.api_token == "tok"
        assert settings.timeout_seconds == 3.5
        assert settings.environment == "staging"
        assert settings.allowed_origins[-1] == "https://app.example.com"

    def test_yaml_file(self, clean_env):
        config = clean_env / "contacts.yml"
        config.write_text(
            "api_url: http://backend:9000\n"
            "notification_ttl: off\n"
            "download_dir: exports\n"
            "allowed_origins:\n"
            "  - http://dash.local\n"
        )

        settings = _load(clean_env, config_path=config)

        assert settings.api_base_url == "http://backend:9000"
        assert settings.notification_ttl_seconds is None
        assert settings.download_dir == Path("exports")
        assert settings.allowed_origins == ["http://dash.local"]

    def test_default_config_path_is_picked_up(self, clean_env):
        (clean_env / "config").mkdir()
        (clean_env / "config" / "contacts.yml").write_text("environment: from-file\n")

        assert _load(clean_env).environment == "from-file"

    def test_env_wins_over_yaml(self, clean_env, monkeypatch):
        config = clean_env / "contacts.yml"
        config.write_text("environment: yaml\n")
        monkeypatch.setenv("CONTACTS_CONFIG", str(config))
        monkeypatch.setenv("CONTACTS_ENV", "env")

        assert _load(clean_env).environment == "env"

    def test_missing_explicit_config(self, clean_env):
        with pytest.raises(ConfigError, match="not found"):
            _load(clean_env, config_path=clean_env / "nope.yml")

    def test_non_mapping_yaml(self, clean_env):
        config = clean_env / "contacts.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            _load(clean_env, config_path=config)

    def test_bad_url(self, clean_env, monkeypatch):
        monkeypatch.setenv("CONTACTS_API_URL", "localhost:8081")
        with pytest.raises(ConfigError, match="Invalid contacts API URL"):
            _load(clean_env)

    @pytest.mark.parametrize("value", ["abc", "-1", "0"])
    def test_bad_timeout(self, clean_env, monkeypatch, value):
        monkeypatch.setenv("CONTACTS_TIMEOUT_SECONDS", value)
        with pytest.raises(ConfigError):
            _load(clean_env)

    def test_notification_ttl_can_be_disabled_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("CONTACTS_NOTIFICATION_TTL", "0")
        assert _load(clean_env).notification_ttl_seconds is None
