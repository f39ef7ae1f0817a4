"""
Layer sequence construction.

Builds the ordered layers for one config file: base layers, the file's own
layers, defaults, command line ignore patterns, and overrides, in that order
of increasing precedence.
"""

import logging
import os
import posixpath
from pathlib import Path, PurePath
from typing import Any, List, Optional

from core.layers.sequence import LayerSequence
from core.loading.module_loader import SourceModuleLoader
from core.models.config import LoaderOptions

logger = logging.getLogger(__name__)


def _as_layers(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _join_pattern(prefix: str, pattern: str) -> str:
    # A leading slash anchors the pattern to cwd, which the prefix now does
    joined = posixpath.normpath(posixpath.join(prefix, pattern.lstrip("/")))
    if pattern.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def rebase_ignore_patterns(patterns: List[str], base_path: Path, cwd: Path) -> List[str]:
    """
    Rewrite cwd-relative ignore patterns so they are relative to `base_path`.

    Negated patterns keep their leading `!`. A leading `/` is dropped, since the
    prefix already anchors the pattern to cwd.

    Args:
        patterns: Ignore globs as given on the command line
        base_path: Directory the config's patterns are evaluated against
        cwd: Directory the command line patterns are relative to

    Returns:
        Patterns prefixed with the path from `base_path` to `cwd`
    """
    if base_path == cwd:
        return list(patterns)

    prefix = PurePath(os.path.relpath(cwd, base_path)).as_posix()

    rebased = []
    for pattern in patterns:
        negated = pattern.startswith("!")
        base_pattern = pattern[1:] if negated else pattern
        rebased.append(("!" if negated else "") + _join_pattern(prefix, base_pattern))
    return rebased


class LayerBuilder:
    """Assembles and normalizes the layer sequence for a config file"""

    def __init__(
        self,
        options: LoaderOptions,
        module_loader: Optional[SourceModuleLoader] = None
    ):
        self.options = options
        self.module_loader = module_loader if module_loader is not None else SourceModuleLoader()

    async def build(self, source_path: Optional[Path], base_path: Path) -> LayerSequence:
        """
        Build the normalized layer sequence for a config file.

        Args:
            source_path: Config file to load, or None for no config file
            base_path: Directory relative paths in the layers refer to

        Returns:
            Normalized, frozen layer sequence
        """
        options = self.options

        logger.debug(
            f"Calculating config array from config file {source_path} and base path {base_path}"
        )

        configs = LayerSequence(
            options.base_config,
            base_path=base_path,
            should_ignore=options.ignore_enabled
        )

        # load config file
        if source_path is not None:
            logger.debug(f"Loading config file {source_path}")
            file_config = await self.module_loader.load(source_path)
            configs.push(*_as_layers(file_config))

        # add in any configured defaults
        configs.push(*options.default_configs)

        # append command line ignore patterns after defaults so they can override them
        if options.ignore_patterns:
            configs.push({
                "ignores": rebase_ignore_patterns(options.ignore_patterns, base_path, options.cwd)
            })

        if options.override_config is not None:
            configs.push(*_as_layers(options.override_config))

        await configs.normalize()

        return configs
