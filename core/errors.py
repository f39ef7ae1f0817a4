"""
Errors raised while locating and loading lintkit config.

Failures from the filesystem, from executing a config module, and from layer
validation are not wrapped; they reach the caller unchanged.
"""

from pathlib import Path
from typing import Optional


class ConfigLoaderError(Exception):
    """Base class for config loader errors"""
    message_template: Optional[str] = None


class ConfigFileMissingError(ConfigLoaderError):
    """No config file was found searching upward from a directory"""
    message_template = "config-file-missing"

    def __init__(self, start_directory: Path):
        self.start_directory = start_directory
        super().__init__("Could not find config file.")


class InvalidArgumentError(ConfigLoaderError, ValueError):
    """A path argument was empty or not a path"""
    pass


class NotFoundError(ConfigLoaderError, LookupError):
    """Cached config requested before it was resolved"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Could not find config file for {path}")


class LayerValidationError(ConfigLoaderError, ValueError):
    """A configuration layer failed validation during normalization"""

    def __init__(self, index: int, reason: str, layer_name: Optional[str] = None):
        self.index = index
        self.layer_name = layer_name
        label = f'"{layer_name}"' if layer_name else f"at index {index}"
        super().__init__(f"Config {label}: {reason}")
