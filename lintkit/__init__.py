"""
lintkit - configuration lookup and layering for a Python linter.

Finds the config file that governs each linted file, loads it as a Python
module, and layers it with base, default, ignore, and override configuration.
"""

__version__ = "1.0.0"

# Package imports for convenient access
from config.loader import ConfigLoader, LegacyConfigLoader
from core.layers.sequence import LayerSequence
from core.models.config import LoaderOptions
from core.models.layers import ConfigLayer

__all__ = [
    "ConfigLoader",
    "LegacyConfigLoader",
    "LayerSequence",
    "LoaderOptions",
    "ConfigLayer",
    "__version__",
]
