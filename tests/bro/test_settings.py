"""
Unit tests for SettingsManager

Tests precedence of defaults, YAML files, environment variables and CLI
overrides, and validation errors.
"""
import pytest
import yaml

from bro.errors import ConfigurationError
from bro.settings import BroSettings, SettingsManager


@pytest.fixture
def manager(tmp_path):
    """Manager that ignores the real user/project configuration."""
    return SettingsManager(
        user_config_path=tmp_path / "home" / ".bro" / "config.yaml",
        project_config_path=tmp_path / "project" / ".bro" / "config.yaml",
        env_file=None,
    )


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestDefaults:

    def test_defaults(self, manager):
        settings = manager.load_settings()

        assert settings == BroSettings()
        assert settings.command == "browserify"
        assert settings.out_dir == "./dist"
        assert settings.watch is False
        assert settings.error == "log"
        assert settings.read is True


class TestPrecedence:

    def test_project_file_overrides_user_file(self, manager):
        write_yaml(manager.user_config_path, {"out_dir": "user", "watch": True})
        write_yaml(manager.project_config_path, {"out_dir": "project"})

        settings = manager.load_settings()

        assert settings.out_dir == "project"
        assert settings.watch is True

    def test_explicit_file_overrides_project_file(self, manager, tmp_path):
        write_yaml(manager.project_config_path, {"out_dir": "project"})
        explicit = write_yaml(tmp_path / "bro.yaml", {"out_dir": "explicit"})

        assert manager.load_settings(config_file=str(explicit)).out_dir == "explicit"

    def test_environment_overrides_files(self, manager, tmp_path, monkeypatch):
        explicit = write_yaml(tmp_path / "bro.yaml", {"command": "browserify"})
        monkeypatch.setenv("BRO_COMMAND", "esbuild --bundle")

        assert manager.load_settings(config_file=str(explicit)).command == "esbuild --bundle"

    def test_cli_overrides_environment(self, manager, monkeypatch):
        monkeypatch.setenv("BRO_ERROR", "emit")

        settings = manager.load_settings(cli_overrides={"error": "log", "watch": None})

        assert settings.error == "log"
        assert settings.watch is False

    def test_env_file_is_loaded(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("BRO_OUT_DIR=from-dotenv\n", encoding="utf-8")
        manager = SettingsManager(
            user_config_path=tmp_path / "none.yaml",
            project_config_path=tmp_path / "none.yaml",
            env_file=str(env_file),
        )

        assert manager.load_settings().out_dir == "from-dotenv"

    def test_list_command_from_environment(self, manager, monkeypatch):
        monkeypatch.setenv("BRO_LIST_COMMAND", "browserify --list")

        settings = manager.load_settings()

        assert settings.list_command == "browserify --list"
        assert BroSettings().list_command is None

    def test_command_as_list(self, manager, tmp_path):
        explicit = write_yaml(tmp_path / "bro.yaml", {"command": ["esbuild", "--bundle"]})
        assert manager.load_settings(config_file=str(explicit)).command == ["esbuild", "--bundle"]


class TestSubstitution:

    def test_variable_with_default(self, manager, tmp_path):
        explicit = write_yaml(tmp_path / "bro.yaml", {"out_dir": "${BRO_TEST_OUT:-build}"})
        assert manager.load_settings(config_file=str(explicit)).out_dir == "build"

    def test_variable_from_environment(self, manager, tmp_path, monkeypatch):
        monkeypatch.setenv("BRO_TEST_OUT", "public")
        explicit = write_yaml(tmp_path / "bro.yaml", {"out_dir": "${BRO_TEST_OUT}/js"})

        assert manager.load_settings(config_file=str(explicit)).out_dir == "public/js"

    def test_missing_variable_raises(self, manager, tmp_path):
        explicit = write_yaml(tmp_path / "bro.yaml", {"out_dir": "${BRO_TEST_UNSET}"})

        with pytest.raises(ConfigurationError, match="BRO_TEST_UNSET"):
            manager.load_settings(config_file=str(explicit))


class TestValidation:

    def test_missing_config_file(self, manager, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            manager.load_settings(config_file=str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, manager, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("out_dir: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            manager.load_settings(config_file=str(bad))

    def test_non_mapping_yaml(self, manager, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            manager.load_settings(config_file=str(bad))

    def test_invalid_error_mode(self, manager):
        with pytest.raises(ConfigurationError, match="error"):
            manager.load_settings(cli_overrides={"error": "explode"})

    def test_invalid_poll_interval(self, manager):
        with pytest.raises(ConfigurationError):
            manager.load_settings(cli_overrides={"poll_interval": 0})

    def test_values_are_normalized(self, manager):
        settings = manager.load_settings(cli_overrides={"error": "EMIT", "log_level": "DEBUG"})

        assert settings.error == "emit"
        assert settings.log_level == "debug"
