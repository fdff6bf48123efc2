"""Configuration for the command-line tool.

The client library itself never reads configuration or the environment;
callers pass the API key to ``OpenAIImagesClient`` explicitly.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

API_KEY_ENV = "OPENAI_API_KEY"
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"


class ConfigError(Exception):
    """Configuration file could not be read"""
    pass


@dataclass
class ClientConfig:
    """API client settings"""
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "WARNING"
    format: str = "text"


@dataclass
class Settings:
    """Application settings"""
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """Load settings.

        Args:
            config_path: YAML file (optional). Without it config/config.yaml
                under the working directory is read if present; a path the
                caller names must exist.
            environ: environment mapping, ``os.environ`` by default

        Returns:
            Settings with environment overrides applied

        Raises:
            ConfigError: unreadable file, or a section that is not a mapping
        """
        if environ is None:
            environ = os.environ

        # 1. Locate the file
        required = config_path is not None
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        # 2. Load YAML
        config_data = {}
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    config_data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Invalid configuration file {config_path}: {e}") from e
            if not isinstance(config_data, dict):
                raise ConfigError(f"Configuration file {config_path} must contain a mapping")
        elif required:
            raise ConfigError(f"Configuration file not found: {config_path}")

        # 3. Client section, API key may come from the environment
        client_data = _section(config_data, "client", config_path)
        try:
            timeout = float(client_data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid client timeout: {e}") from e
        client = ClientConfig(
            api_key=environ.get(API_KEY_ENV) or client_data.get("api_key", ""),
            base_url=client_data.get("base_url", DEFAULT_BASE_URL),
            timeout=timeout,
        )

        # 4. Logging section
        logging_data = _section(config_data, "logging", config_path)
        logging_config = LoggingConfig(
            level=environ.get(LOG_LEVEL_ENV, logging_data.get("level", "WARNING")),
            format=logging_data.get("format", "text"),
        )

        return cls(client=client, logging=logging_config)


def _section(config_data: dict, name: str, config_path: Path) -> dict:
    data = config_data.get(name) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' in {config_path} must be a mapping")
    return data


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Convenience wrapper for :meth:`Settings.load`."""
    return Settings.load(config_path, environ)
