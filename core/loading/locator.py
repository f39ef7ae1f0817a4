"""
Config file location.

Decides which config file governs a directory and which directory paths in
that config are relative to. An explicit override path wins, an explicit
disable means no config file at all, and otherwise the nearest candidate file
found walking up from the directory is used.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import aiofiles.os

from core.errors import ConfigFileMissingError
from core.models.config import LoaderOptions, ResolvedLocation, normalize_path

logger = logging.getLogger(__name__)


async def find_up(names: Iterable[str], start: Union[str, Path]) -> Optional[Path]:
    """
    Find the first existing file named one of `names`, walking up from `start`.

    Every directory from `start` to the filesystem root is checked, and within
    a directory the names are tried in order.

    Args:
        names: Candidate file names in priority order
        start: Absolute directory to start in

    Returns:
        Absolute path of the match, or None when the root is reached
    """
    candidates = list(names)
    directory = Path(start)

    while True:
        for name in candidates:
            candidate = directory / name
            if await aiofiles.os.path.isfile(candidate):
                return candidate

        parent = directory.parent
        if parent == directory:
            return None
        directory = parent


class LocationResolver:
    """Resolves the config file and base path for directories"""

    def __init__(self, options: LoaderOptions, filenames: Sequence[str]):
        self.options = options
        self.filenames = tuple(filenames)

    async def resolve(self, directory: Path) -> ResolvedLocation:
        """
        Determine where config for `directory` comes from.

        Args:
            directory: Absolute directory being linted

        Returns:
            The config file (None when lookup is disabled) and its base path

        Raises:
            ConfigFileMissingError: No candidate file exists above `directory`
        """
        cwd = self.options.cwd

        override_path = self.options.override_path
        if override_path is not None:
            logger.debug(f"Override config file path is {override_path}")
            return ResolvedLocation(source_path=override_path, base_path=cwd)

        if self.options.lookup_disabled:
            logger.debug("Config file lookup is disabled")
            return ResolvedLocation(source_path=None, base_path=cwd)

        logger.debug(f"Searching for {', '.join(self.filenames)} from {directory}")
        source_path = await find_up(self.filenames, directory)

        if source_path is None:
            raise ConfigFileMissingError(directory)

        base_path = normalize_path(cwd, source_path.parent)
        logger.debug(f"Found config file {source_path}")

        return ResolvedLocation(source_path=source_path, base_path=base_path)
