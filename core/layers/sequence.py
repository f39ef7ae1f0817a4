"""
Ordered configuration layers.

A LayerSequence collects layers in precedence order (later layers override
earlier ones), resolves composed entries on `normalize()`, validates every
layer, and then answers per-file questions: is this file ignored, and what
configuration applies to it.

Glob matching is intentionally simple: `fnmatch` semantics where `*` also
crosses directory separators, a leading `**/` that may match nothing, a
trailing `/` that matches directories, and `!` to negate. When several ignore
patterns match, the last one wins.
"""

import inspect
import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path, PurePath
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from core.errors import LayerValidationError
from core.models.config import normalize_path
from core.models.layers import ConfigLayer

logger = logging.getLogger(__name__)


def glob_match(path: str, pattern: str) -> bool:
    """Match a posix relative path against a single glob pattern"""
    if pattern.endswith("/"):
        directory_pattern = pattern.rstrip("/")
        parts = path.split("/")[:-1]
        return any(
            glob_match("/".join(parts[:i]), directory_pattern)
            for i in range(1, len(parts) + 1)
        )

    if fnmatchcase(path, pattern):
        return True
    return pattern.startswith("**/") and fnmatchcase(path, pattern[3:])


def matches_any(path: str, patterns: List[str]) -> bool:
    """Apply patterns in order; a negated pattern un-matches"""
    matched = False
    for pattern in patterns:
        negated = pattern.startswith("!")
        if glob_match(path, pattern[1:] if negated else pattern):
            matched = not negated
    return matched


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class LayerSequence:
    """
    Precedence-ordered configuration layers for one base path.

    Layers are pushed in order, lowest precedence first. `normalize()` must be
    awaited before the sequence is queried; after that it is frozen.
    """

    def __init__(
        self,
        layers: Any = None,
        *,
        base_path: Union[str, Path],
        should_ignore: bool = True
    ):
        """
        Initialize layer sequence.

        Args:
            layers: Seed layer or list of layers
            base_path: Directory that relative paths in layers refer to
            should_ignore: Whether ignore patterns are enforced
        """
        self.base_path = normalize_path(base_path)
        self.should_ignore = should_ignore
        self._pending: List[Any] = []
        self._layers: Tuple[ConfigLayer, ...] = ()
        self._normalized = False
        self._config_cache: Dict[str, Optional[ConfigLayer]] = {}

        if layers is not None:
            self.push(*(layers if isinstance(layers, (list, tuple)) else [layers]))

    def push(self, *layers: Any) -> None:
        """Append layers; only allowed before normalization"""
        if self._normalized:
            raise RuntimeError("Cannot add layers to a normalized LayerSequence")
        self._pending.extend(layers)

    @property
    def is_normalized(self) -> bool:
        return self._normalized

    @property
    def layers(self) -> Tuple[ConfigLayer, ...]:
        """Validated layers, lowest precedence first"""
        if not self._normalized:
            raise RuntimeError("LayerSequence must be normalized before use")
        return self._layers

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[ConfigLayer]:
        return iter(self.layers)

    def __getitem__(self, index: int) -> ConfigLayer:
        return self.layers[index]

    def __repr__(self) -> str:
        state = f"{len(self._layers)} layers" if self._normalized else "not normalized"
        return f"LayerSequence(base_path={str(self.base_path)!r}, {state})"

    async def normalize(self, context: Optional[Dict[str, Any]] = None) -> "LayerSequence":
        """
        Resolve composed layers and validate all of them.

        Nested lists are flattened. Callables are called with a context dict
        (awaited when they return an awaitable) and their result is resolved
        the same way.

        Args:
            context: Extra values passed to config functions

        Returns:
            The sequence itself

        Raises:
            LayerValidationError: A layer is not a valid configuration object
        """
        if self._normalized:
            return self

        context = {"base_path": self.base_path, **(context or {})}

        resolved: List[Any] = []
        for item in self._pending:
            resolved.extend(await self._resolve(item, context))

        self._layers = tuple(
            self._validate(index, item) for index, item in enumerate(resolved)
        )
        self._pending = []
        self._normalized = True

        logger.debug(f"Normalized {len(self._layers)} layers for {self.base_path}")
        return self

    async def _resolve(self, item: Any, context: Dict[str, Any]) -> List[Any]:
        if isinstance(item, (list, tuple)):
            flattened: List[Any] = []
            for child in item:
                flattened.extend(await self._resolve(child, context))
            return flattened

        if callable(item) and not isinstance(item, ConfigLayer):
            result = item(context)
            if inspect.isawaitable(result):
                result = await result
            return await self._resolve(result, context)

        return [item]

    def _validate(self, index: int, item: Any) -> ConfigLayer:
        if isinstance(item, ConfigLayer):
            return item

        if not isinstance(item, dict):
            raise LayerValidationError(
                index, f"expected a mapping, got {type(item).__name__}"
            )

        try:
            return ConfigLayer.model_validate(item)
        except ValidationError as exc:
            raise LayerValidationError(index, str(exc), item.get("name")) from exc

    @property
    def global_ignores(self) -> List[str]:
        """Ignore patterns from layers that only ignore"""
        patterns: List[str] = []
        for layer in self.layers:
            if layer.is_global_ignore:
                patterns.extend(layer.ignores)
        return patterns

    def _relative(self, file_path: Union[str, Path]) -> Optional[str]:
        absolute = normalize_path(self.base_path, file_path)
        relative = os.path.relpath(absolute, self.base_path)
        if relative == os.curdir or PurePath(relative).parts[0] == os.pardir:
            return None
        return PurePath(relative).as_posix()

    def is_file_ignored(self, file_path: Union[str, Path]) -> bool:
        """
        Check whether a file is excluded by global ignores.

        Files outside the base path are always ignored when ignoring is on.
        """
        if not self.should_ignore:
            return False

        relative = self._relative(file_path)
        if relative is None:
            return True

        return matches_any(relative, self.global_ignores)

    def get_config(self, file_path: Union[str, Path]) -> Optional[ConfigLayer]:
        """
        Merged configuration for a file.

        Returns None when the file is ignored, lies outside the base path, or
        no layer with `files` patterns matches it.
        """
        key = str(normalize_path(self.base_path, file_path))
        if key in self._config_cache:
            return self._config_cache[key]

        config = self._calculate_config(file_path)
        self._config_cache[key] = config
        return config

    def _calculate_config(self, file_path: Union[str, Path]) -> Optional[ConfigLayer]:
        relative = self._relative(file_path)
        if relative is None:
            return None
        if self.is_file_ignored(file_path):
            logger.debug(f"File {relative} is ignored")
            return None

        matching: List[ConfigLayer] = []
        explicitly_matched = False

        for layer in self.layers:
            if layer.is_global_ignore:
                continue
            if layer.ignores and matches_any(relative, layer.ignores):
                continue
            if layer.files is not None:
                if not matches_any(relative, layer.files):
                    continue
                explicitly_matched = True
            matching.append(layer)

        if not explicitly_matched:
            logger.debug(f"No files pattern matches {relative}")
            return None

        rules: Dict[str, Any] = {}
        settings: Dict[str, Any] = {}
        language_options: Dict[str, Any] = {}

        for layer in matching:
            for rule_id, entry in layer.rules.items():
                previous = rules.get(rule_id)
                # A bare severity keeps options configured by an earlier layer
                if isinstance(entry, int) and isinstance(previous, list):
                    rules[rule_id] = [entry, *previous[1:]]
                else:
                    rules[rule_id] = entry
            settings = _deep_merge(settings, layer.settings)
            language_options = _deep_merge(language_options, layer.language_options)

        return ConfigLayer(rules=rules, settings=settings, language_options=language_options)
