"""
Default configuration values for lintkit.

Config file names and the default layers the CLI appends after a project's
own config.
"""

import copy
from typing import Any, Dict, List

# Candidate config file names, checked in this order in every directory
CONFIG_FILENAMES = (
    "lintkit.config.py",
    "lintkit_config.py",
    ".lintkit.py",
)

# Always ignored unless un-ignored with a negated pattern
DEFAULT_IGNORES = [
    "**/__pycache__/",
    "**/.venv/",
    ".git/",
]

DEFAULT_CONFIGS: List[Dict[str, Any]] = [
    {
        "name": "lintkit/defaults/files",
        "files": ["**/*.py", "**/*.pyi"],
    },
    {
        "name": "lintkit/defaults/ignores",
        "ignores": DEFAULT_IGNORES,
    },
]


def get_default_configs() -> List[Dict[str, Any]]:
    """Get a fresh copy of the default layers"""
    return copy.deepcopy(DEFAULT_CONFIGS)
