"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

import pytest

from factcheck_feedback.config.loader import load_config
from factcheck_feedback.config.settings import Settings
from factcheck_feedback.utils.errors import ConfigurationError


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.database_path == "data/factcheck.db"
    assert settings.app_secrets == {}
    assert settings.recount_concurrency == 5


def test_settings_read_app_secrets_from_env(monkeypatch):
    monkeypatch.setenv("APP_SECRETS", '{"WEBSITE": "s3cret"}')
    monkeypatch.setenv("DATABASE_PATH", "/tmp/other.db")

    settings = Settings(_env_file=None)

    assert settings.app_secrets == {"WEBSITE": "s3cret"}
    assert settings.database_path == "/tmp/other.db"


def test_is_trusted_app():
    settings = Settings(_env_file=None, app_secrets={"WEBSITE": "s3cret"})

    assert settings.is_trusted_app("WEBSITE", "s3cret")
    assert not settings.is_trusted_app("WEBSITE", "wrong")
    assert not settings.is_trusted_app("LINE", "s3cret")
    assert not settings.is_trusted_app(None, None)


def test_load_config_merges_settings_over_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "api:\n"
        "  cors_origins:\n"
        "    - https://cofacts.example\n"
        "storage:\n"
        "  database_path: from-yaml.db\n"
        "  journal: wal\n"
    )
    settings = Settings(_env_file=None, database_path="from-env.db")

    config = load_config(str(config_file), settings=settings)

    assert config["api"]["cors_origins"] == ["https://cofacts.example"]
    assert config["storage"]["database_path"] == "from-env.db"
    assert config["storage"]["journal"] == "wal"
    assert config["logging"]["level"] == "INFO"


def test_load_config_missing_file_uses_settings_only(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"), settings=Settings(_env_file=None))
    assert config["app"]["port"] == 8000
    assert "api" not in config


def test_load_config_malformed_yaml_raises_configuration_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("api: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Cannot read config file"):
        load_config(str(config_file), settings=Settings(_env_file=None))


def test_load_config_non_mapping_raises_configuration_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(ConfigurationError, match="must contain a mapping"):
        load_config(str(config_file), settings=Settings(_env_file=None))
