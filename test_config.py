#!/usr/bin/env python3
"""
Unit tests for asana_cli.config
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from asana_cli.config import Config, config_help, config_locations, load_config
from asana_cli.errors import AsanaConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with an empty home so no real .env is picked up."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return {"home": home, "work": work}


class TestLoadConfig:
    """Tests for load_config sources and precedence."""

    def test_environment_only(self, isolated):
        config = load_config(environ={"ASANA_TOKEN": "tok", "ASANA_WORKSPACE": "ws"})
        assert config == Config(token="tok", workspace="ws", timeout=None)

    def test_environment_wins_over_file(self, isolated):
        (isolated["work"] / ".env").write_text("ASANA_TOKEN=file_tok\nASANA_WORKSPACE=file_ws\n")

        config = load_config(environ={"ASANA_TOKEN": "env_tok"})

        assert config.token == "env_tok"
        assert config.workspace == "file_ws"

    def test_explicit_file(self, isolated, tmp_path):
        path = tmp_path / "prod.env"
        path.write_text("ASANA_TOKEN=prod_tok\nASANA_WORKSPACE=prod_ws\nASANA_TIMEOUT=7.5\n")

        config = load_config(str(path), environ={})

        assert config.token == "prod_tok"
        assert config.workspace == "prod_ws"
        assert config.timeout == 7.5

    def test_explicit_file_skips_default_locations(self, isolated, tmp_path):
        (isolated["work"] / ".env").write_text("ASANA_WORKSPACE=local_ws\n")
        path = tmp_path / "other.env"
        path.write_text("ASANA_TOKEN=other_tok\n")

        with pytest.raises(AsanaConfigError) as exc_info:
            load_config(str(path), environ={})

        assert "ASANA_WORKSPACE not set" in str(exc_info.value)

    def test_missing_explicit_file(self, isolated, tmp_path):
        missing = tmp_path / "nope.env"

        with pytest.raises(AsanaConfigError) as exc_info:
            load_config(str(missing), environ={"ASANA_TOKEN": "t", "ASANA_WORKSPACE": "w"})

        assert f"failed to load config file {missing}" in str(exc_info.value)

    def test_first_location_wins(self, isolated):
        (isolated["work"] / ".env").write_text("ASANA_TOKEN=local_tok\n")
        user_dir = isolated["home"] / ".config" / "asana-cli"
        user_dir.mkdir(parents=True)
        (user_dir / ".env").write_text("ASANA_TOKEN=user_tok\nASANA_WORKSPACE=user_ws\n")

        config = load_config(environ={}, require_workspace=False)

        assert config.token == "local_tok"
        # Later files are not merged in
        assert config.workspace == ""

    def test_user_config_dir(self, isolated):
        user_dir = isolated["home"] / ".config" / "asana-cli"
        user_dir.mkdir(parents=True)
        (user_dir / ".env").write_text("ASANA_TOKEN=user_tok\nASANA_WORKSPACE=user_ws\n")

        config = load_config(environ={})

        assert config.token == "user_tok"
        assert config.workspace == "user_ws"

    def test_unreadable_default_file_skipped(self, isolated):
        (isolated["work"] / ".env").write_text("ASANA_TOKEN=file_tok\n")

        with patch("asana_cli.config.dotenv_values", side_effect=PermissionError("Permission denied")):
            config = load_config(environ={"ASANA_TOKEN": "env_tok", "ASANA_WORKSPACE": "env_ws"})

        assert config == Config(token="env_tok", workspace="env_ws")

    def test_unreadable_explicit_file_is_config_error(self, isolated, tmp_path):
        path = tmp_path / "locked.env"
        path.write_text("ASANA_TOKEN=t\n")

        with patch("asana_cli.config.dotenv_values", side_effect=PermissionError("Permission denied")):
            with pytest.raises(AsanaConfigError) as exc_info:
                load_config(str(path), environ={"ASANA_TOKEN": "t", "ASANA_WORKSPACE": "w"})

        assert "failed to load config file" in str(exc_info.value)

    def test_environment_not_mutated(self, isolated, monkeypatch):
        monkeypatch.delenv("ASANA_WORKSPACE", raising=False)
        monkeypatch.setenv("ASANA_TOKEN", "env_tok")
        (isolated["work"] / ".env").write_text("ASANA_WORKSPACE=file_ws\n")

        config = load_config()

        assert config.workspace == "file_ws"
        assert "ASANA_WORKSPACE" not in os.environ


class TestMissingValues:
    """Tests for required keys."""

    def test_missing_token(self, isolated):
        with pytest.raises(AsanaConfigError) as exc_info:
            load_config(environ={"ASANA_WORKSPACE": "ws"})

        message = str(exc_info.value)
        assert message.startswith("ASANA_TOKEN not set.")
        assert "https://app.asana.com/0/my-apps" in message

    def test_missing_workspace(self, isolated):
        with pytest.raises(AsanaConfigError) as exc_info:
            load_config(environ={"ASANA_TOKEN": "tok"})

        assert str(exc_info.value).startswith("ASANA_WORKSPACE not set.")

    def test_workspace_optional_for_token_only_commands(self, isolated):
        config = load_config(environ={"ASANA_TOKEN": "tok"}, require_workspace=False)
        assert config.workspace == ""


class TestTimeout:
    """Tests for ASANA_TIMEOUT parsing."""

    def test_numeric(self, isolated):
        config = load_config(environ={"ASANA_TOKEN": "t", "ASANA_WORKSPACE": "w", "ASANA_TIMEOUT": "30"})
        assert config.timeout == 30.0

    @pytest.mark.parametrize("raw", ["fast", "-1", "0"])
    def test_invalid(self, isolated, raw):
        with pytest.raises(AsanaConfigError):
            load_config(environ={"ASANA_TOKEN": "t", "ASANA_WORKSPACE": "w", "ASANA_TIMEOUT": raw})


class TestHelpText:
    def test_lists_locations(self, isolated):
        text = config_help()
        for location in config_locations():
            assert str(location) in text
        assert "--config" in text
