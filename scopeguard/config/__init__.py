"""Configuration loading utilities for the fetch filter.

This package provides YAML-based configuration loading with environment
overrides for fetch filter settings.
"""

from .loader import (
    load_filter_config,
    create_default_filter_config,
    save_default_config,
    ConfigLoadError
)

__all__ = [
    "load_filter_config",
    "create_default_filter_config",
    "save_default_config",
    "ConfigLoadError"
]
