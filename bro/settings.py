"""
Settings Manager for the bro command line.

Loads and merges command-line settings from multiple sources:
- System defaults
- User configuration (~/.bro/config.yaml)
- Project configuration (./.bro/config.yaml)
- Explicit configuration (--config file.yaml)
- Environment variables (BRO_*, optionally loaded from a .env file)
- CLI arguments (highest precedence)

Values may reference environment variables with ${VAR} or ${VAR:-default}.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from bro.config import ErrorMode
from bro.errors import ConfigurationError
from bro.utils.logging_config import LogLevel


logger = logging.getLogger(__name__)


class EnvironmentVariables:
    """Environment variables recognized by the settings manager."""

    COMMAND = "BRO_COMMAND"
    LIST_COMMAND = "BRO_LIST_COMMAND"
    OUT_DIR = "BRO_OUT_DIR"
    WATCH = "BRO_WATCH"
    ERROR = "BRO_ERROR"
    POLL_INTERVAL = "BRO_POLL_INTERVAL"
    LOG_LEVEL = "BRO_LOG_LEVEL"
    LOG_FILE = "BRO_LOG_FILE"

    @classmethod
    def mapping(cls) -> Dict[str, str]:
        """Map environment variable names to settings fields."""
        return {
            cls.COMMAND: "command",
            cls.LIST_COMMAND: "list_command",
            cls.OUT_DIR: "out_dir",
            cls.WATCH: "watch",
            cls.ERROR: "error",
            cls.POLL_INTERVAL: "poll_interval",
            cls.LOG_LEVEL: "log_level",
            cls.LOG_FILE: "log_file",
        }


class BroSettings(BaseModel):
    """Validated settings for a ``bro bundle`` run."""

    command: Union[str, List[str]] = "browserify"
    list_command: Optional[Union[str, List[str]]] = None
    out_dir: str = "./dist"
    watch: bool = False
    error: str = ErrorMode.LOG.value
    poll_interval: float = Field(default=0.5, gt=0)
    timeout: Optional[float] = Field(default=None, gt=0)
    log_level: str = LogLevel.INFO.value
    log_file: Optional[str] = None
    read: bool = True

    @field_validator("error")
    @classmethod
    def _check_error(cls, value: str) -> str:
        valid = [mode.value for mode in ErrorMode]
        if value.lower() not in valid:
            raise ValueError(f"Invalid error mode '{value}'. Valid options: {valid}")
        return value.lower()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        valid = [level.value for level in LogLevel]
        if value.lower() not in valid:
            raise ValueError(f"Invalid log_level '{value}'. Valid options: {valid}")
        return value.lower()


class SettingsManager:
    """Manages settings loading, validation, and environment variable integration."""

    def __init__(
        self,
        user_config_path: Optional[Path] = None,
        project_config_path: Optional[Path] = None,
        env_file: Optional[str] = ".env",
    ):
        self.user_config_path = user_config_path or Path.home() / ".bro" / "config.yaml"
        self.project_config_path = project_config_path or Path.cwd() / ".bro" / "config.yaml"
        self.env_file = env_file

    def load_settings(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
    ) -> BroSettings:
        """
        Load settings from all sources with proper precedence.

        Args:
            config_file: Optional explicit configuration file path
            cli_overrides: CLI values; None entries are ignored

        Returns:
            BroSettings: Merged, validated settings

        Raises:
            ConfigurationError: If a file is invalid or a value fails validation
        """
        if self.env_file and os.path.exists(self.env_file):
            load_dotenv(self.env_file)

        settings: Dict[str, Any] = {}

        if self.user_config_path.exists():
            settings.update(self._load_yaml_file(self.user_config_path))

        if self.project_config_path.exists():
            settings.update(self._load_yaml_file(self.project_config_path))

        if config_file:
            path = Path(config_file)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_file}")
            settings.update(self._load_yaml_file(path))

        settings.update(self._load_environment_variables())

        if cli_overrides:
            settings.update({k: v for k, v in cli_overrides.items() if v is not None})

        settings = self.substitute_environment_variables(settings)

        try:
            result = BroSettings(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

        logger.debug(f"Loaded settings: {result.model_dump()}")
        return result

    def substitute_environment_variables(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ${VAR} and ${VAR:-default} syntax with environment variable values.

        Raises:
            ConfigurationError: If a referenced variable without default is not set
        """
        pattern = r'\$\{([^}]+)\}'

        def replace_var(match):
            var_expr = match.group(1)
            if ':-' in var_expr:
                var_name, default_value = var_expr.split(':-', 1)
                return os.environ.get(var_name, default_value)
            if var_expr not in os.environ:
                raise ConfigurationError(f"Required environment variable '{var_expr}' is not set")
            return os.environ[var_expr]

        def substitute(value):
            if isinstance(value, str):
                return re.sub(pattern, replace_var, value)
            if isinstance(value, list):
                return [substitute(item) for item in value]
            return value

        return {key: substitute(value) for key, value in settings.items()}

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        logger.debug(f"Loaded configuration from {path}")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        values = {}
        for env_var, key in EnvironmentVariables.mapping().items():
            value = os.environ.get(env_var)
            if value:
                values[key] = value
        return values
