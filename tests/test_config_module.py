"""Tests for :mod:`customgraphs.config`."""

from __future__ import annotations

import os

import pytest

from customgraphs import config


@pytest.fixture()
def env_file(tmp_path, monkeypatch):
    path = tmp_path / ".env"
    monkeypatch.setattr(config, "_project_env_path", lambda: path)
    config._load_environment.cache_clear()
    yield path
    config._load_environment.cache_clear()


def test_get_env_reads_from_project_dotenv(env_file, monkeypatch):
    key = "CUSTOMGRAPHS_TEST_TEMP"
    monkeypatch.delenv(key, raising=False)
    env_file.write_text(f"{key}=from-file\n")

    try:
        assert config.get_env(key) == "from-file"
    finally:
        os.environ.pop(key, None)


def test_get_env_prefers_process_environment(env_file, monkeypatch):
    env_file.write_text("CUSTOMGRAPHS_DEFAULT_USER=file-user\n")
    monkeypatch.setenv("CUSTOMGRAPHS_DEFAULT_USER", "process-user")

    assert config.get_env("CUSTOMGRAPHS_DEFAULT_USER") == "process-user"


def test_get_env_returns_default_when_missing(env_file, monkeypatch):
    monkeypatch.delenv("CUSTOMGRAPHS_DOES_NOT_EXIST", raising=False)

    assert config.get_env("CUSTOMGRAPHS_DOES_NOT_EXIST", default="fallback") == "fallback"


def test_settings_from_env(env_file, monkeypatch):
    monkeypatch.setenv("CUSTOMGRAPHS_DEFAULT_PRIVILEGES", "AR")
    monkeypatch.setenv("CUSTOMGRAPHS_INCLUDE_ALL_GROUP", "false")
    monkeypatch.setenv("CUSTOMGRAPHS_DEFAULT_USER", "operator")
    monkeypatch.setenv("CUSTOMGRAPHS_RESOLUTION", "30")

    settings = config.Settings.from_env()

    assert settings.default_privileges == "AR"
    assert settings.include_all_group is False
    assert settings.default_user == "operator"
    assert settings.resolution == 30


def test_settings_defaults(env_file, monkeypatch):
    for key in (
        "CUSTOMGRAPHS_DEFAULT_PRIVILEGES",
        "CUSTOMGRAPHS_INCLUDE_ALL_GROUP",
        "CUSTOMGRAPHS_DEFAULT_USER",
        "CUSTOMGRAPHS_RESOLUTION",
    ):
        monkeypatch.delenv(key, raising=False)

    assert config.Settings.from_env() == config.Settings()


@pytest.mark.parametrize("value", ["abc", "0"])
def test_settings_rejects_bad_resolution(env_file, monkeypatch, value):
    monkeypatch.setenv("CUSTOMGRAPHS_RESOLUTION", value)
    with pytest.raises(ValueError):
        config.Settings.from_env()
