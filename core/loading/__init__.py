"""
Config file location, module loading, and layer building.
"""

from .builder import LayerBuilder, rebase_ignore_patterns
from .cache import KeyedCache, per_key, singleton_key
from .locator import LocationResolver, find_up
from .module_loader import ConfigModuleExecutor, SourceModuleLoader

__all__ = [
    "LayerBuilder",
    "rebase_ignore_patterns",
    "KeyedCache",
    "per_key",
    "singleton_key",
    "LocationResolver",
    "find_up",
    "ConfigModuleExecutor",
    "SourceModuleLoader"
]
