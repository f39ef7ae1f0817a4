"""
Unit tests for config file location.

Tests upward search, file name priority, override paths, and disabled lookup.
"""

from pathlib import Path

import pytest

from config.defaults import CONFIG_FILENAMES
from core.errors import ConfigFileMissingError
from core.loading.locator import LocationResolver, find_up
from core.models.config import LoaderOptions


class TestFindUp:
    """Test find_up helper"""

    @pytest.mark.asyncio
    async def test_finds_in_start_directory(self, tmp_path):
        """Test a match in the starting directory itself"""
        (tmp_path / "lintkit.config.py").write_text("config = {}\n")

        assert await find_up(CONFIG_FILENAMES, tmp_path) == tmp_path / "lintkit.config.py"

    @pytest.mark.asyncio
    async def test_finds_nearest_ancestor(self, tmp_path):
        """Test the closest ancestor wins over farther ones"""
        (tmp_path / "lintkit.config.py").write_text("config = {}\n")
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        (tmp_path / "a" / ".lintkit.py").write_text("config = {}\n")

        found = await find_up(CONFIG_FILENAMES, tmp_path / "a" / "b" / "c")

        assert found == tmp_path / "a" / ".lintkit.py"

    @pytest.mark.asyncio
    async def test_name_priority_within_directory(self, tmp_path):
        """Test candidate order decides between files in one directory"""
        for name in reversed(CONFIG_FILENAMES):
            (tmp_path / name).write_text("config = {}\n")

        assert await find_up(CONFIG_FILENAMES, tmp_path) == tmp_path / CONFIG_FILENAMES[0]

        (tmp_path / CONFIG_FILENAMES[0]).unlink()
        assert await find_up(CONFIG_FILENAMES, tmp_path) == tmp_path / CONFIG_FILENAMES[1]

    @pytest.mark.asyncio
    async def test_directories_are_not_matches(self, tmp_path):
        """Test a directory named like a config file is skipped"""
        (tmp_path / "inner" / "lintkit.config.py").mkdir(parents=True)
        (tmp_path / "lintkit_config.py").write_text("config = {}\n")

        found = await find_up(CONFIG_FILENAMES, tmp_path / "inner")

        assert found == tmp_path / "lintkit_config.py"

    @pytest.mark.asyncio
    async def test_returns_none_at_root(self, tmp_path):
        """Test exhausting the search returns None"""
        start = tmp_path / "a" / "b" / "c"
        start.mkdir(parents=True)

        assert await find_up(["no-such-config-file-anywhere.py"], start) is None


class TestLocationResolver:
    """Test LocationResolver functionality"""

    @pytest.mark.asyncio
    async def test_search_sets_base_path(self, project):
        """Test the base path is the directory holding the found file"""
        resolver = LocationResolver(LoaderOptions(cwd=project / "src"), CONFIG_FILENAMES)

        location = await resolver.resolve(project / "src" / "app")

        assert location.source_path == project / "lintkit.config.py"
        assert location.base_path == project
        assert not location.is_disabled

    @pytest.mark.asyncio
    async def test_nested_config(self, project):
        """Test a nested config file governs its subtree"""
        resolver = LocationResolver(LoaderOptions(cwd=project), CONFIG_FILENAMES)

        location = await resolver.resolve(project / "packages" / "nested" / "deep")

        assert location.source_path == project / "packages" / "nested" / "lintkit_config.py"
        assert location.base_path == project / "packages" / "nested"

    @pytest.mark.asyncio
    async def test_override_path(self, project, tmp_path):
        """Test an override path is used for every directory"""
        options = LoaderOptions(cwd=project, config_file_path="configs/custom.py")
        resolver = LocationResolver(options, CONFIG_FILENAMES)

        for directory in (project / "src" / "app", project / "packages" / "nested", tmp_path):
            location = await resolver.resolve(directory)
            assert location.source_path == project / "configs" / "custom.py"
            assert location.base_path == project

    @pytest.mark.asyncio
    async def test_absolute_override_path(self, project, tmp_path):
        """Test an absolute override path is kept as is"""
        override = tmp_path / "elsewhere" / "lint.py"
        resolver = LocationResolver(
            LoaderOptions(cwd=project, config_file_path=override), CONFIG_FILENAMES
        )

        location = await resolver.resolve(project / "src")

        assert location.source_path == override
        assert location.base_path == project

    @pytest.mark.asyncio
    async def test_lookup_disabled(self, project):
        """Test disabling lookup yields no source path"""
        resolver = LocationResolver(
            LoaderOptions(cwd=project, config_file_path=False), CONFIG_FILENAMES
        )

        location = await resolver.resolve(project / "src" / "app")

        assert location.source_path is None
        assert location.base_path == project
        assert location.is_disabled

    @pytest.mark.asyncio
    async def test_missing_config(self, tmp_path):
        """Test search exhaustion raises ConfigFileMissingError"""
        start = tmp_path / "a" / "b" / "c"
        start.mkdir(parents=True)
        resolver = LocationResolver(LoaderOptions(cwd=tmp_path), ["no-such-config-file-anywhere.py"])

        with pytest.raises(ConfigFileMissingError) as exc_info:
            await resolver.resolve(start)

        assert exc_info.value.message_template == "config-file-missing"
        assert exc_info.value.start_directory == start
        assert str(exc_info.value) == "Could not find config file."
