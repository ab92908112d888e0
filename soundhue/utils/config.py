"""Configuration management for soundhue."""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import ConfigurationError


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default_config.yaml"


class Config:
    """Configuration manager backed by a YAML document."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to custom config file. If None, uses default config.
        """
        self._config: Dict[str, Any] = {}
        self.path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        self._load_config(self.path)

    def _load_config(self, config_path: Path) -> None:
        """Load configuration from YAML file."""
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                data={"path": str(config_path)},
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {config_path}",
                data={"path": str(config_path)},
                cause=e,
            ) from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping",
                data={"path": str(config_path), "type": type(loaded).__name__},
            )

        self._config = loaded
        self._expand_paths()

    def _expand_paths(self) -> None:
        """Expand ~ in file paths."""
        logging_section = self._config.get('logging')
        if isinstance(logging_section, dict) and logging_section.get('log_file'):
            logging_section['log_file'] = os.path.expanduser(logging_section['log_file'])

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'tempo.history_size')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value
            value: Value to set
        """
        keys = key_path.split('.')
        config = self._config

        for key in keys[:-1]:
            if key not in config or not isinstance(config[key], dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value


# Global config instance
_config_instance: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_path: Path to custom config file (only used on first call)

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = Config(config_path)

    return _config_instance
