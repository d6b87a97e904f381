"""Unit tests for ConfigLoader."""

import os
from unittest.mock import patch

import pytest

from cocinero_core.config import (
    CONFIG_PATH_ENV,
    CocineroConfig,
    ConfigLoader,
    deep_merge,
    resolve_env_vars,
)
from cocinero_core.errors import ProvisionError
from cocinero_core.types import LogFormat, LogLevel


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run each test from an empty directory with no config in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestLoad:
    def test_defaults_when_no_file(self):
        loader = ConfigLoader()

        config = loader.load()

        assert config == CocineroConfig()
        assert config.execution.shell == "/bin/sh"
        assert config.packages.install_command == ["apt-get", "install", "-y"]
        assert config.recipes.filename == "recipe.toml"
        assert loader.config_path is None

    def test_local_file(self, tmp_path):
        (tmp_path / "cocinero.yaml").write_text(
            """
logging:
  level: debug
  format: json
  components:
    action: false
execution:
  action_timeout: 30
packages:
  install_command: [dnf, install, -y]
"""
        )

        config = ConfigLoader().load()

        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert config.logging.components.action is False
        assert config.logging.components.run is True
        assert config.execution.action_timeout == 30
        assert config.packages.install_command == ["dnf", "install", "-y"]

    def test_user_file(self, tmp_path):
        user = tmp_path / "home" / ".config" / "cocinero" / "config.yaml"
        user.parent.mkdir(parents=True)
        user.write_text("services:\n  systemctl: /usr/bin/systemctl\n")

        assert ConfigLoader().load().services.systemctl == "/usr/bin/systemctl"

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("recipes:\n  filename: cook.toml\n")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        loader = ConfigLoader()

        assert loader.load().recipes.filename == "cook.toml"
        assert loader.config_path == path

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ProvisionError) as exc_info:
            ConfigLoader().load(tmp_path / "missing.yaml")

        assert exc_info.value.code == "CONFIG_INVALID"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("logging: [")

        with pytest.raises(ProvisionError) as exc_info:
            ConfigLoader().load(path)

        assert "Invalid YAML" in exc_info.value.detail

    def test_overrides_win(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("logging:\n  level: ERROR\n  format: json\n")

        config = ConfigLoader().load(path, overrides={"logging": {"level": "DEBUG"}})

        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON

    def test_env_vars_resolved(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("execution:\n  shell: ${COCINERO_TEST_SHELL:-/bin/bash}\n")

        assert ConfigLoader().load(path).execution.shell == "/bin/bash"

    def test_disclaimer_can_be_disabled(self):
        config = ConfigLoader().load_from_dict({"recipes": {"disclaimer": None}})

        assert config.recipes.disclaimer is None


class TestValidate:
    def test_unknown_keys_are_warnings(self):
        result = ConfigLoader().validate({"server": {}, "execution": {"shel": "x"}})

        assert result.valid
        assert [w.path for w in result.warnings] == ["server", "execution.shel"]

    @pytest.mark.parametrize(
        ("data", "path"),
        [
            ({"execution": {"capture_output": "yes"}}, "execution.capture_output"),
            ({"execution": {"action_timeout": True}}, "execution.action_timeout"),
            ({"execution": {"action_timeout": -1}}, "execution.action_timeout"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"packages": {"install_command": []}}, "packages.install_command"),
            ({"services": "systemctl"}, "services"),
            ({"logging": {"options": {"truncate_at": "x"}}}, "logging.options.truncate_at"),
            ({"logging": {"options": {"truncate_at": True}}}, "logging.options.truncate_at"),
            ({"logging": {"components": {"hook": "off"}}}, "logging.components.hook"),
            ({"logging": {"components": ["run"]}}, "logging.components"),
        ],
    )
    def test_errors(self, data, path):
        result = ConfigLoader().validate(data)

        assert not result.valid
        assert path in [e.path for e in result.errors]

    def test_load_rejects_invalid(self):
        with pytest.raises(ProvisionError) as exc_info:
            ConfigLoader().load_from_dict({"logging": {"format": "xml"}})

        assert exc_info.value.code == "CONFIG_INVALID"
        assert "logging.format" in exc_info.value.detail

    def test_nested_unknown_key_is_warning(self):
        result = ConfigLoader().validate({"logging": {"options": {"colour": True}}})

        assert result.valid
        assert [w.path for w in result.warnings] == ["logging.options.colour"]

    def test_load_rejects_bad_nested_value(self):
        with pytest.raises(ProvisionError) as exc_info:
            ConfigLoader().load_from_dict({"logging": {"options": {"truncate_at": "x"}}})

        assert exc_info.value.code == "CONFIG_INVALID"
        assert "logging.options.truncate_at" in exc_info.value.detail


class TestEnvVars:
    def test_set_value(self):
        with patch.dict(os.environ, {"COCINERO_X": "1"}):
            assert resolve_env_vars("a-${COCINERO_X}") == "a-1"

    def test_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert resolve_env_vars("${COCINERO_X:-d}") == "d"

    def test_required_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ProvisionError) as exc_info:
                resolve_env_vars("${COCINERO_X:?set COCINERO_X}")

        assert exc_info.value.detail == "set COCINERO_X"

    def test_required_plain(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ProvisionError):
                resolve_env_vars("${COCINERO_X}")


def test_deep_merge():
    merged = deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}, "e": 4})

    assert merged == {"a": {"b": 3, "c": 2}, "d": 1, "e": 4}
