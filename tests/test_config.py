from __future__ import annotations

import pytest

from college_saver.config import DEFAULT_CORS_ORIGINS, load_settings

ENV_KEYS = ["APP_ENV", "LOG_LEVEL", "CORS_ORIGINS", "FALLBACK_PRICES", "COLLEGE_SAVER_CONFIG"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_config_file(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"))

    assert settings.env == "dev"
    assert settings.log_level == "INFO"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.fallback_prices["VTI"] > 0


def test_yaml_file_supplies_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "app:\n"
        "  env: prod\n"
        "  log_level: warning\n"
        "pricing:\n"
        "  fallback_prices:\n"
        "    vti: 275.5\n",
        encoding="utf-8",
    )

    settings = load_settings(str(path))

    assert settings.env == "prod"
    assert settings.log_level == "WARNING"
    assert settings.fallback_prices == {"VTI": 275.5}


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("app:\n  env: prod\n", encoding="utf-8")
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("FALLBACK_PRICES", "voo=410, VT=110.25")

    settings = load_settings(str(path))

    assert settings.env == "staging"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.fallback_prices == {"VOO": 410.0, "VT": 110.25}


def test_blank_env_vars_are_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "   ")
    assert load_settings(str(tmp_path / "missing.yaml")).env == "dev"


def test_malformed_fallback_prices(tmp_path, monkeypatch):
    monkeypatch.setenv("FALLBACK_PRICES", "VTI")
    with pytest.raises(ValueError):
        load_settings(str(tmp_path / "missing.yaml"))
