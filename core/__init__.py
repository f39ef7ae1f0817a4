"""
lintkit core package

Config location, module loading, layer building, and caching.
"""

__version__ = "1.0.0"

from .models import ConfigLayer, LoaderOptions, ResolvedLocation, GlobalSettings

__all__ = [
    "ConfigLayer",
    "LoaderOptions",
    "ResolvedLocation",
    "GlobalSettings"
]
