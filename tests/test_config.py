"""Test configuration loading."""
import pytest
from pathlib import Path
from slashsync.config.settings import Config, load_config, _parse_config


@pytest.fixture
def config_file(tmp_path):
    """Create a temporary config file."""
    config_content = """
application_id: 123456789012345678

api:
  base_url: "http://localhost:8080/api"
  timeout_seconds: 5

sync:
  skip_unchanged: true
  commands_file: /tmp/commands.yaml
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)
    return config_path


def test_load_config(config_file):
    """Config loads from YAML file."""
    config = load_config(config_file)

    assert config.application_id == "123456789012345678"
    assert config.api.base_url == "http://localhost:8080/api"
    assert config.api.timeout_seconds == 5.0
    assert config.sync.skip_unchanged is True
    assert config.sync.commands_file == "/tmp/commands.yaml"
    assert config.bot_token == ""


def test_load_config_defaults(tmp_path):
    """Config applies defaults for missing values."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("application_id: '42'\n")

    config = load_config(config_path)

    assert config.application_id == "42"
    assert config.api.base_url == "https://discord.com/api/v10"
    assert config.api.timeout_seconds == 30.0
    assert config.sync.skip_unchanged is False


def test_load_config_missing_file(tmp_path):
    """A missing file yields default config."""
    config = load_config(tmp_path / "nope.yaml")

    assert config.application_id == ""
    assert config.sync.commands_file.endswith("commands.yaml")


def test_load_config_empty_file(tmp_path):
    """An empty file yields default config."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")

    config = load_config(config_path)

    assert config.api.timeout_seconds == 30.0


def test_config_expands_home_path():
    """commands_file expands ~ to home directory."""
    config = _parse_config({"sync": {"commands_file": "~/.slashsync/cmds.yaml"}})

    assert "~" not in config.sync.commands_file
    assert config.sync.commands_file.startswith(str(Path.home()))


def test_is_complete():
    """is_complete needs both application id and token."""
    assert Config(application_id="1", bot_token="t").is_complete() is True
    assert Config(application_id="1").is_complete() is False
    assert Config(bot_token="t").is_complete() is False
