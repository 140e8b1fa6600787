from pathlib import Path

import pytest

from config import ConfigurationManager, LogLevel, ToolSettings
from errors import InvalidSettingError


@pytest.fixture
def manager():
    return ConfigurationManager(load_env_file=False)


def test_defaults(manager, monkeypatch):
    for name in (
        "AZURE_OUTPUT_FORMAT",
        "AZURE_SUBSCRIPTION_ID",
        "AZURE_LOCATION",
        "AZURE_STORAGE_CONFIG_FILE",
        "AZURE_STORAGE_LOG_FILE",
        "AZURE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = manager.get_settings()
    assert settings.output_format == "table"
    assert settings.subscription_id is None
    assert settings.location == "uksouth"
    assert settings.config_file == Path("azure_storage.config")
    assert settings.log_file == Path("storage_operations.log")
    assert settings.azure_log_level is LogLevel.WARNING


def test_environment_overrides(manager, monkeypatch, tmp_path):
    monkeypatch.setenv("AZURE_OUTPUT_FORMAT", "YAML")
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub-id")
    monkeypatch.setenv("AZURE_STORAGE_CONFIG_FILE", str(tmp_path / "state.config"))
    monkeypatch.setenv("AZURE_LOG_LEVEL", "debug")
    settings = manager.get_settings()
    assert settings.output_format == "yaml"
    assert settings.subscription_id == "sub-id"
    assert settings.config_file == tmp_path / "state.config"
    assert settings.azure_log_level is LogLevel.DEBUG


def test_unsupported_output_format(tmp_path):
    with pytest.raises(InvalidSettingError, match="xml"):
        ToolSettings(tmp_path / "c", tmp_path / "l", output_format="xml")


def test_unsupported_log_level(manager, monkeypatch):
    monkeypatch.setenv("AZURE_LOG_LEVEL", "chatty")
    with pytest.raises(InvalidSettingError):
        manager.get_settings()
