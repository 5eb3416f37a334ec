"""Tests for configuration loading and validation."""

import os
from unittest.mock import patch

import pytest

from services.receiver.app.core.config import Settings, get_settings, validate_settings


class TestSettingsDefaults:
    """Tests for Settings defaults and environment loading."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.port == 8080
        assert settings.github_webhook_secret is None
        assert settings.database_url is None
        assert settings.persistence_timeout_seconds == 5.0
        assert set(settings.persistable_event_types) == {"push", "issue_comment", "pull_request"}
        assert settings.signature_required is False
        assert settings.storage_enabled is False

    def test_reads_environment(self):
        env = {
            "PORT": "9000",
            "GITHUB_WEBHOOK_SECRET": "s3cret",
            "DATABASE_URL": "postgresql://u:p@db:5432/hooks",
            "PERSISTENCE_TIMEOUT_SECONDS": "2.5",
            "PERSISTABLE_EVENT_TYPES": '["push", "release"]',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.port == 9000
        assert settings.github_webhook_secret == "s3cret"
        assert settings.signature_required is True
        assert settings.storage_enabled is True
        assert settings.persistence_timeout_seconds == 2.5
        assert settings.persistable_event_types == ["push", "release"]

    def test_whitespace_secret_does_not_require_signature(self):
        assert Settings(github_webhook_secret="   ").signature_required is False

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestSettingsValidation:
    """Tests for validate_settings function."""

    def test_valid_configuration(self):
        validate_settings(Settings(github_webhook_secret="x", database_url="sqlite://"))

    def test_non_positive_timeout_raises(self):
        with pytest.raises(ValueError) as exc_info:
            validate_settings(Settings(persistence_timeout_seconds=0))

        assert "PERSISTENCE_TIMEOUT_SECONDS" in str(exc_info.value)

    @pytest.mark.parametrize("port", [0, -1, 70000])
    def test_invalid_port_raises(self, port):
        with pytest.raises(ValueError) as exc_info:
            validate_settings(Settings(port=port))

        assert "PORT" in str(exc_info.value)

    def test_non_positive_retention_raises(self):
        with pytest.raises(ValueError):
            validate_settings(Settings(retention_days=0))

    def test_blank_event_type_raises(self):
        with pytest.raises(ValueError) as exc_info:
            validate_settings(Settings(persistable_event_types=["push", " "]))

        assert "PERSISTABLE_EVENT_TYPES" in str(exc_info.value)

    def test_missing_secret_in_production_warns(self, capsys):
        validate_settings(Settings(env="production", github_webhook_secret=None))

        captured = capsys.readouterr()
        assert "SECURITY WARNING" in captured.out
        assert "GITHUB_WEBHOOK_SECRET" in captured.out

    def test_missing_secret_in_development_is_quiet(self, capsys):
        validate_settings(Settings(env="development", github_webhook_secret=None))

        assert capsys.readouterr().out == ""

    def test_create_app_rejects_invalid_configuration(self):
        from services.receiver.app.main import create_app

        with pytest.raises(RuntimeError) as exc_info:
            create_app(settings=Settings(persistence_timeout_seconds=-1))

        assert "Invalid configuration" in str(exc_info.value)
