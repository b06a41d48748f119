"""
Configuration loader for YAML and TOML files.

Handles loading, validation, and saving of the pipeline configuration.
"""

import tomllib
from pathlib import Path
from typing import Optional, Dict, Any, Union
import yaml
from pydantic import ValidationError

from .models import PipelineConfig


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


DEFAULT_CONFIG_NAMES = [
    "commitgate.yaml",
    "commitgate.yml",
    "commitgate.toml",
    ".commitgate.yaml",
    ".commitgate.yml",
    ".commitgate.toml",
]


class ConfigLoader:
    """
    Loads and validates the pipeline configuration.

    Accepts a single YAML or TOML file, or a directory containing one of
    the default configuration file names.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to config file or directory
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[PipelineConfig] = None

    def load(self) -> "ConfigLoader":
        """
        Load the configuration from the config path.

        Returns:
            Self for method chaining
        """
        if self.config_path is None:
            raise ConfigError("No configuration path specified")

        if self.config_path.is_file():
            file_path = self.config_path
        elif self.config_path.is_dir():
            file_path = self._find_in_directory(self.config_path)
        else:
            raise ConfigError(f"Configuration path does not exist: {self.config_path}")

        self._config = self._parse(self._read(file_path), source=file_path)
        return self

    def _find_in_directory(self, dir_path: Path) -> Path:
        """Locate a configuration file inside a directory."""
        for filename in DEFAULT_CONFIG_NAMES:
            file_path = dir_path / filename
            if file_path.exists():
                return file_path
        raise ConfigError(
            f"No configuration file in {dir_path} "
            f"(looked for: {', '.join(DEFAULT_CONFIG_NAMES)})"
        )

    def _read(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML or TOML file."""
        if file_path.suffix == ".toml":
            return self._read_toml(file_path)
        return self._read_yaml(file_path)

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {file_path} must be a mapping")
        return data

    def _read_toml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a TOML file."""
        try:
            with open(file_path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

    def _parse(self, data: Dict[str, Any], source: Optional[Path] = None) -> PipelineConfig:
        """Parse the pipeline configuration."""
        try:
            return PipelineConfig(**data)
        except ValidationError as e:
            where = f" in {source}" if source else ""
            raise ConfigError(f"Invalid pipeline configuration{where}: {e}")

    @property
    def config(self) -> PipelineConfig:
        """Get the loaded configuration."""
        if self._config is None:
            raise ConfigError("Configuration has not been loaded")
        return self._config

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save the current configuration as YAML.

        Args:
            output_path: File to write, or a directory to write commitgate.yaml into

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        if output_path.is_dir() or not output_path.suffix:
            output_path.mkdir(parents=True, exist_ok=True)
            output_path = output_path / DEFAULT_CONFIG_NAMES[0]
        else:
            output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.config.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        return output_path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigLoader":
        """
        Create a ConfigLoader from a dictionary.

        Useful for programmatic configuration.
        """
        loader = cls()
        loader._config = loader._parse(data)
        return loader
