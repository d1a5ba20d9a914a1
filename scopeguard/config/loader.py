"""Configuration loader for fetch filter settings with YAML support and environment overrides.

This module provides functionality to load FetchFilterConfig from YAML files
with support for environment-specific overrides.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
import logging

from pydantic import ValidationError

from ..errors import ScopeguardError
from ..models.fetch import FetchFilterConfig


logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "SCOPEGUARD_ENV"


class ConfigLoadError(ScopeguardError):
    """Exception raised when configuration loading fails."""
    pass


def load_filter_config(
    config_path: Union[str, Path],
    environment: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> FetchFilterConfig:
    """Load FetchFilterConfig from YAML file with environment overrides.

    Args:
        config_path: Path to YAML config file.
        environment: Environment name for override selection. If None, uses
            the SCOPEGUARD_ENV variable.
        overrides: Additional configuration overrides to apply.

    Returns:
        Configured FetchFilterConfig instance.

    Raises:
        ConfigLoadError: If configuration loading or validation fails.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse YAML config: {e}")
    except IOError as e:
        raise ConfigLoadError(f"Failed to read config file: {e}")

    if config_data is None:
        config_data = {}

    if not isinstance(config_data, dict):
        raise ConfigLoadError("Config file must contain a YAML dictionary")

    # Determine environment from parameter or environment variable
    if environment is None:
        environment = os.getenv(ENVIRONMENT_VARIABLE, "production")

    environments = config_data.pop("environments", None) or {}
    if environment in environments:
        config_data = _deep_merge(config_data, environments[environment] or {})
        logger.info("Applied environment overrides for: %s", environment)

    if overrides:
        config_data = _deep_merge(config_data, overrides)
        logger.debug("Applied additional configuration overrides")

    try:
        config = FetchFilterConfig(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid fetch filter configuration in {config_path}: {e}")

    logger.info("Loaded fetch filter configuration from %s", config_path)
    return config


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Lists are replaced, not concatenated.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def create_default_filter_config() -> Dict[str, Any]:
    """Create a default fetch filter configuration dictionary.

    Returns:
        Default configuration values suitable for YAML serialization.
    """
    return {
        "scope_patterns": [
            "^https?://example\\.com(/.*)?$"
        ],
        "exclude_patterns": [
            ".*/logout.*",
            ".*\\.(png|jpe?g|gif|svg|ico|woff2?)$"
        ],
        "domains_always_in_scope": [
            {"domain": "example.com", "include_subdomains": False}
        ],
        "context": None,
        "environments": {
            "staging": {
                "scope_patterns": ["^https?://staging\\.example\\.com(/.*)?$"],
                "domains_always_in_scope": [],
            },
            "test": {
                "scope_patterns": ["^https?://localhost(:\\d+)?(/.*)?$"],
                "exclude_patterns": [],
                "domains_always_in_scope": [],
            }
        }
    }


def save_default_config(output_path: Union[str, Path]) -> None:
    """Save default fetch filter configuration to YAML file.

    Raises:
        ConfigLoadError: If file writing fails.
    """
    config_data = create_default_filter_config()

    try:
        with open(output_path, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)
        logger.info("Saved default fetch filter configuration to: %s", output_path)
    except IOError as e:
        raise ConfigLoadError(f"Failed to save config file: {e}")
