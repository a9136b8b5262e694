"""Configuration loading and validation for the Lambda HTTP adapter.

Configuration only covers ambient concerns (logging). It is read from the
``LAMBDA_ADAPTER_CONFIG`` environment variable (JSON) or from a YAML file,
and validated with pydantic.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LAMBDA_ADAPTER_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class LoggingConfig(BaseModel):
    """``logging`` section of the configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Root log level")
    pretty: bool = Field(
        default=False, description="Indented JSON logs for local development"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate that the level is a standard logging level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(_LOG_LEVELS)}")
        return level


class AdapterConfig(BaseModel):
    """Top-level adapter configuration."""

    model_config = ConfigDict(extra="forbid")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def validate_config(config: Any) -> AdapterConfig:
    """Validate a parsed configuration dictionary.

    Args:
        config: Parsed configuration (from YAML or JSON)

    Returns:
        Validated AdapterConfig

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if config is None:
        return AdapterConfig()

    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a dictionary")

    try:
        return AdapterConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_and_validate_config(config_path: str = DEFAULT_CONFIG_PATH) -> AdapterConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AdapterConfig

    Raises:
        ConfigurationError: If validation fails
        FileNotFoundError: If config file doesn't exist
    """
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")

    return validate_config(config)


def load_config(config_path: Optional[str] = None) -> AdapterConfig:
    """Load configuration from the environment, a YAML file, or defaults.

    The ``LAMBDA_ADAPTER_CONFIG`` environment variable (JSON) takes precedence.
    Otherwise ``config_path`` (default ``config.yaml``) is read if it exists.

    Args:
        config_path: Optional path to a YAML configuration file

    Returns:
        Validated AdapterConfig

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config_json = os.environ.get(CONFIG_ENV_VAR)
    if config_json:
        try:
            config = json.loads(config_json)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Failed to parse {CONFIG_ENV_VAR} as JSON: {e}"
            ) from e
        logger.info("Loaded configuration from environment variable")
        return validate_config(config)

    try:
        config = load_and_validate_config(config_path or DEFAULT_CONFIG_PATH)
        logger.info("Loaded configuration from YAML file")
        return config
    except FileNotFoundError:
        logger.debug("No configuration found, using defaults")
        return AdapterConfig()


def get_logging_config(config: AdapterConfig) -> Dict[str, Any]:
    """Get the logging section as keyword arguments for configure_json_logging."""
    return config.logging.model_dump()
