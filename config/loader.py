"""
Config loaders for lintkit.

ConfigLoader looks up config from the directory of each file being linted and
caches per directory. LegacyConfigLoader pins the first lookup for the whole
run. Both cache locations and layer sequences for their lifetime; a config
file changed on disk after it was loaded is not noticed by the same loader.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from core.errors import InvalidArgumentError, NotFoundError
from core.layers.sequence import LayerSequence
from core.loading.builder import LayerBuilder
from core.loading.cache import KeyedCache, KeyPolicy, per_key, singleton_key
from core.loading.locator import LocationResolver
from core.loading.module_loader import SourceModuleLoader
from core.models.config import LoaderOptions, ResolvedLocation, normalize_path
from .defaults import CONFIG_FILENAMES

logger = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]


def assert_valid_path(path: Any, name: str = "file_path") -> None:
    """Raise InvalidArgumentError unless `path` is a non-empty path"""
    if isinstance(path, os.PathLike):
        path = os.fspath(path)
    if not path or not isinstance(path, str):
        raise InvalidArgumentError(f"'{name}' must be a non-empty string")


class ConfigLoader:
    """
    Loads and caches configuration, looking up from the file being linted.

    Locations are cached by absolute directory and layer sequences by config
    file, so every directory governed by the same config file shares one
    sequence.
    """

    location_key_policy: KeyPolicy = staticmethod(per_key)
    layers_key_policy: KeyPolicy = staticmethod(per_key)

    def __init__(
        self,
        options: Optional[LoaderOptions] = None,
        *,
        filenames: Sequence[str] = CONFIG_FILENAMES,
        module_loader: Optional[SourceModuleLoader] = None
    ):
        """
        Initialize config loader.

        Args:
            options: Loader options (defaults to the current directory, lookup on)
            filenames: Config file names to search for, in priority order
            module_loader: Loader for config modules (shared default if None)
        """
        self.options = options if options is not None else LoaderOptions()
        self.resolver = LocationResolver(self.options, filenames)
        self.builder = LayerBuilder(self.options, module_loader)

        self._locations: KeyedCache[ResolvedLocation] = KeyedCache(
            "locations", self.location_key_policy
        )
        self._config_arrays: KeyedCache[LayerSequence] = KeyedCache(
            "config arrays", self.layers_key_policy
        )

    def _absolute(self, path: PathArg) -> Path:
        return normalize_path(self.options.cwd, path)

    async def _locate_config_file_to_use(self, directory: Path) -> ResolvedLocation:
        return await self._locations.get_or_create(
            directory, lambda: self.resolver.resolve(directory)
        )

    async def _calculate_config_array(self, location: ResolvedLocation) -> LayerSequence:
        return await self._config_arrays.get_or_create(
            location.source_path,
            lambda: self.builder.build(location.source_path, location.base_path)
        )

    async def find_config_file_for_file(self, file_path: PathArg) -> Optional[Path]:
        """
        Config file governing a file.

        Uses the override config file if one was given, otherwise searches
        upward from the file's directory.

        Returns:
            The config file path, or None when config files are disabled

        Raises:
            InvalidArgumentError: `file_path` is empty or not a path
            ConfigFileMissingError: No config file was found
        """
        assert_valid_path(file_path)

        return await self.find_config_file_for_directory(self._absolute(file_path).parent)

    async def find_config_file_for_directory(self, dir_path: PathArg) -> Optional[Path]:
        """Config file governing a directory (see find_config_file_for_file)"""
        assert_valid_path(dir_path, "dir_path")

        location = await self._locate_config_file_to_use(self._absolute(dir_path))
        return location.source_path

    async def load_config_array_for_file(self, file_path: PathArg) -> LayerSequence:
        """
        Layer sequence for a file, loading its config file if needed.

        This is the lookup the CLI performs for every file it lints.

        Raises:
            InvalidArgumentError: `file_path` is empty or not a path
            ConfigFileMissingError: No config file was found
        """
        assert_valid_path(file_path)

        logger.debug(f"Calculating config for file {file_path}")

        return await self.load_config_array_for_directory(self._absolute(file_path).parent)

    async def load_config_array_for_directory(self, dir_path: PathArg) -> LayerSequence:
        """Layer sequence for a directory (see load_config_array_for_file)"""
        assert_valid_path(dir_path, "dir_path")

        logger.debug(f"Calculating config for directory {dir_path}")

        location = await self._locate_config_file_to_use(self._absolute(dir_path))

        logger.debug(
            f"Using config file {location.source_path} and base path {location.base_path}"
        )
        return await self._calculate_config_array(location)

    def get_cached_config_array_for_file(self, file_path: PathArg) -> LayerSequence:
        """
        Previously built layer sequence for a file.

        Synchronous and reads nothing from disk; intended for code that runs
        after the config for the file was already loaded.

        Raises:
            InvalidArgumentError: `file_path` is empty or not a path
            NotFoundError: The config for the file was not loaded yet
        """
        assert_valid_path(file_path)

        logger.debug(f"Looking up cached config for {file_path}")

        return self.get_cached_config_array_for_directory(self._absolute(file_path).parent)

    def get_cached_config_array_for_directory(self, dir_path: PathArg) -> LayerSequence:
        """Previously built layer sequence for a directory"""
        assert_valid_path(dir_path, "dir_path")

        logger.debug(f"Looking up cached config for {dir_path}")

        location = self._locations.peek(self._absolute(dir_path))
        if location is None:
            raise NotFoundError(os.fspath(dir_path))

        config_array = self._config_arrays.peek(location.source_path)
        if config_array is None:
            raise NotFoundError(os.fspath(dir_path))

        return config_array

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        return {
            "locations": self._locations.get_stats(),
            "config_arrays": self._config_arrays.get_stats()
        }


class LegacyConfigLoader(ConfigLoader):
    """
    Loads configuration once for the whole run.

    The first directory queried decides the config file and layer sequence;
    every later call reuses them whatever directory it names. Do not use one
    instance for directories that need different config.
    """

    location_key_policy: KeyPolicy = staticmethod(singleton_key)
    layers_key_policy: KeyPolicy = staticmethod(singleton_key)
