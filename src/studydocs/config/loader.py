"""Configuration loader for studydocs settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ..errors import ConfigError
from .models import PipelineConfig

CONFIG_ENV_VAR = "STUDYDOCS_CONFIG"


class ConfigLoader:
    """Loads and validates configuration files."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the config loader.

        Args:
            config_dir: Directory that relative config paths are resolved
                against. Defaults to the current working directory.
        """
        self.config_dir = config_dir or Path.cwd()

    def load(self, config_file: str | Path) -> PipelineConfig:
        """Load a pipeline configuration from YAML.

        Args:
            config_file: Path to the YAML file

        Returns:
            Parsed PipelineConfig object

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        path = self._resolve_path(config_file)
        data = self._load_yaml(path)
        return PipelineConfig.from_dict(data)

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a config file path."""
        path = Path(file_path).expanduser()
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def load_config(config_file: str | Path | None = None) -> PipelineConfig:
    """
    Build the pipeline configuration for the host process.

    Resolution order: explicit ``config_file``, then the ``STUDYDOCS_CONFIG``
    environment variable (a ``.env`` file is honoured), then defaults.
    """
    if config_file is None:
        load_dotenv()
        config_file = os.environ.get(CONFIG_ENV_VAR) or None

    if config_file is None:
        return PipelineConfig()

    return ConfigLoader().load(config_file)
