"""
Configuration management for lintkit

Handles config file lookup, loading, layering, and caching.
"""

from core.errors import (
    ConfigFileMissingError,
    ConfigLoaderError,
    InvalidArgumentError,
    LayerValidationError,
    NotFoundError,
)
from .loader import ConfigLoader, LegacyConfigLoader
from .defaults import CONFIG_FILENAMES, DEFAULT_CONFIGS

__all__ = [
    "ConfigLoader",
    "LegacyConfigLoader",
    "CONFIG_FILENAMES",
    "DEFAULT_CONFIGS",
    "ConfigLoaderError",
    "ConfigFileMissingError",
    "InvalidArgumentError",
    "LayerValidationError",
    "NotFoundError",
]
