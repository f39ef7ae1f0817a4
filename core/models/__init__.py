"""
Core data models for lintkit

Pydantic models for loader options, settings, and configuration layers.
"""

from .config import LoaderOptions, ResolvedLocation, GlobalSettings, normalize_path
from .layers import ConfigLayer, normalize_severity

__all__ = [
    # Configuration
    "LoaderOptions",
    "ResolvedLocation",
    "GlobalSettings",
    "normalize_path",

    # Layers
    "ConfigLayer",
    "normalize_severity"
]
