"""Pytest fixtures: config file writers and a sample project tree."""

import os
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from core.loading.module_loader import ConfigModuleExecutor


class CountingExecutor(ConfigModuleExecutor):
    """Executor that records every real module execution"""

    def __init__(self):
        super().__init__()
        self.runs = []

    async def _run(self, path: Path):
        self.runs.append(path)
        return await super()._run(path)


def _write(path: Path, source: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


def _bump_mtime(path: Path, seconds: int = 2) -> int:
    stat = path.stat()
    mtime_ns = stat.st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(stat.st_atime_ns, mtime_ns))
    return mtime_ns


@pytest.fixture
def write_config() -> Callable[[Path, str], Path]:
    """Write (dedented) Python source to a config file, creating parents"""
    return _write


@pytest.fixture
def bump_mtime() -> Callable[..., int]:
    """Move a file's mtime forward so a rewrite is always seen as a change"""
    return _bump_mtime


@pytest.fixture
def counting_executor() -> CountingExecutor:
    return CountingExecutor()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    Project tree with a root config and a nested package with its own config:

        proj/lintkit.config.py
        proj/src/app/
        proj/src/lib/
        proj/packages/nested/lintkit_config.py
        proj/packages/nested/deep/
    """
    root = tmp_path / "proj"
    _write(root / "lintkit.config.py", """
        config = [
            {"name": "root/files", "files": ["**/*.py"]},
            {"name": "root/rules", "rules": {"no-print": "error", "max-line": ["warn", 100]}},
        ]
    """)
    (root / "src" / "app").mkdir(parents=True)
    (root / "src" / "lib").mkdir(parents=True)
    _write(root / "packages" / "nested" / "lintkit_config.py", """
        config = {"name": "nested", "files": ["**/*.py"], "rules": {"no-print": "off"}}
    """)
    (root / "packages" / "nested" / "deep").mkdir(parents=True)
    return root
