"""
Loading of Python config modules.

A config file is executed as a module and its exported value (the module-level
`config` attribute) becomes one or more layers. A file is re-executed only when
its modification time differs from the one its cached module was executed from.

The executor keeps one module per path and registers it in `sys.modules` under
a single name derived from the path, so repeated loads replace entries instead
of adding new ones. Source is compiled directly so that the interpreter's
bytecode cache, which only tracks whole-second mtimes, never serves stale code.
"""

import hashlib
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Optional, Tuple, Union

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

# Module-level name a config file assigns its layer (or list of layers) to
EXPORT_NAME = "config"

MODULE_NAME_PREFIX = "_lintkit_config_"

# Last mtime (ns) each config file had when it was successfully loaded.
# Shared by every loader in the process; entries are added, never removed, so
# the size is bounded by the number of distinct config files ever loaded.
_imported_config_mtimes: Dict[str, int] = {}


def module_name_for(path: Union[str, Path]) -> str:
    """Stable `sys.modules` name for a config file"""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:16]
    return f"{MODULE_NAME_PREFIX}{digest}"


class ConfigModuleExecutor:
    """
    Executes config files as modules and caches them by path.

    `execute(path)` returns the cached export when the file was executed before;
    `execute(path, force=True)` always runs the current source again and
    replaces the cached module. Each cached module remembers the mtime of the
    source it was executed from.
    """

    def __init__(self, export_name: str = EXPORT_NAME):
        self.export_name = export_name
        self._modules: Dict[str, Tuple[Optional[int], ModuleType]] = {}

    def __len__(self) -> int:
        return len(self._modules)

    def loaded_mtime(self, path: Path) -> Optional[int]:
        """Mtime the cached module for `path` was executed from, if any"""
        entry = self._modules.get(str(path))
        return entry[0] if entry is not None else None

    async def execute(
        self,
        path: Path,
        force: bool = False,
        mtime: Optional[int] = None
    ) -> Any:
        """
        Get the exported value of a config module.

        Args:
            path: Absolute path to the config file
            force: Re-execute even if a module for this path is cached
            mtime: Mtime of the source being executed, stored with the module

        Returns:
            The module's exported value, or None when it exports nothing
        """
        key = str(path)

        entry = self._modules.get(key)
        if entry is None or force:
            module = await self._run(path)
            self._modules[key] = (mtime, module)
        else:
            logger.debug(f"Reusing executed config module for {path}")
            module = entry[1]

        return getattr(module, self.export_name, None)

    async def _run(self, path: Path) -> ModuleType:
        """Compile and execute a config file in a fresh module"""
        async with aiofiles.open(path, 'rb') as f:
            source = await f.read()

        name = module_name_for(path)
        module = ModuleType(name)
        module.__file__ = str(path)

        code = compile(source, str(path), "exec", dont_inherit=True)

        previous = sys.modules.get(name)
        sys.modules[name] = module
        try:
            exec(code, module.__dict__)
        except BaseException:
            if previous is not None:
                sys.modules[name] = previous
            else:
                sys.modules.pop(name, None)
            raise

        logger.debug(f"Executed config module {path} as {name}")
        return module


_default_executor = ConfigModuleExecutor()


class SourceModuleLoader:
    """Loads config exports, reloading a file only after it changed on disk"""

    def __init__(self, executor: Optional[ConfigModuleExecutor] = None):
        self.executor = executor if executor is not None else _default_executor

    def should_force_reload(self, path: Path, mtime: int) -> bool:
        """True if the executor has no module for `path` from this mtime"""
        return self.executor.loaded_mtime(path) != mtime

    async def load(self, path: Path) -> Any:
        """
        Load the exported value of a config file.

        Args:
            path: Absolute path to the config file

        Returns:
            A single layer or a list of layers, as exported by the file

        Raises:
            OSError: The file cannot be read
            SyntaxError: The file is not valid Python
            Exception: Anything raised while executing the module body
        """
        logger.debug(f"Loading config from {path}")

        mtime = (await aiofiles.os.stat(path)).st_mtime_ns

        force = self.should_force_reload(path, mtime)
        if force:
            if _imported_config_mtimes.get(str(path)) == mtime:
                logger.debug(f"Config file {path} is current but not yet executed here, executing it")
            else:
                logger.debug(f"Config file {path} is new or changed (mtime {mtime}), executing it")

        config = await self.executor.execute(path, force=force, mtime=mtime)

        _imported_config_mtimes[str(path)] = mtime

        return config
