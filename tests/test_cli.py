"""
Unit tests for CLI functionality.

Tests the lintkit command-line interface commands: find-config, print-config,
check-ignored.
"""

import json

import pytest
from click.testing import CliRunner

from lintkit.cli import main


@pytest.fixture
def runner(project, monkeypatch):
    """CliRunner operating from the root of the sample project"""
    monkeypatch.chdir(project)
    for name in ("CONFIG_FILE", "NO_CONFIG_LOOKUP", "LEGACY_LOOKUP", "IGNORE_ENABLED", "LOG_LEVEL"):
        monkeypatch.delenv(f"LINTKIT_{name}", raising=False)
    return CliRunner()


class TestMainGroup:
    """Test global options"""

    def test_version(self, runner):
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert "lintkit" in result.output

    def test_config_conflicts_with_no_lookup(self, runner):
        """Test --config and --no-config-lookup are mutually exclusive"""
        result = runner.invoke(main, ['--config', 'x.py', '--no-config-lookup', 'find-config', '.'])

        assert result.exit_code == 2
        assert "cannot be used together" in result.output


class TestFindConfigCommand:
    """Test the lintkit find-config command"""

    def test_directory(self, runner, project):
        result = runner.invoke(main, ['find-config', 'src/app'])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(project / "lintkit.config.py")

    def test_nested_directory(self, runner, project):
        result = runner.invoke(main, ['find-config', 'packages/nested/deep'])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(project / "packages" / "nested" / "lintkit_config.py")

    def test_file(self, runner, project):
        (project / "src" / "app" / "main.py").write_text("print('hi')\n")

        result = runner.invoke(main, ['find-config', 'src/app/main.py'])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(project / "lintkit.config.py")

    def test_config_option(self, runner, project):
        result = runner.invoke(main, ['--config', 'configs/other.py', 'find-config', 'src'])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(project / "configs" / "other.py")

    def test_no_config_lookup(self, runner):
        result = runner.invoke(main, ['--no-config-lookup', 'find-config', 'src'])

        assert result.exit_code == 0
        assert "No config file in use" in result.stdout

    def test_no_config_lookup_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("LINTKIT_NO_CONFIG_LOOKUP", "1")

        result = runner.invoke(main, ['find-config', 'src'])

        assert result.exit_code == 0
        assert "No config file in use" in result.stdout


class TestPrintConfigCommand:
    """Test the lintkit print-config command"""

    def test_merged_config(self, runner):
        """Test the merged rules for a file are printed as JSON"""
        result = runner.invoke(main, ['print-config', 'src/app/main.py'])

        assert result.exit_code == 0
        config = json.loads(result.stdout)
        assert config["rules"] == {"no-print": 2, "max-line": [1, 100]}
        assert config["settings"] == {}
        assert "files" not in config

    def test_nested_config(self, runner):
        result = runner.invoke(main, ['print-config', 'packages/nested/deep/mod.py'])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["rules"] == {"no-print": 0}

    def test_unmatched_file(self, runner):
        """Test a file no layer applies to prints null"""
        result = runner.invoke(main, ['print-config', 'README.md'])

        assert result.exit_code == 0
        assert result.stdout.strip() == "null"

    def test_missing_config_file(self, runner):
        """Test loader failures exit with status 2 and a message"""
        result = runner.invoke(main, ['--config', 'missing.py', 'print-config', 'src/app/main.py'])

        assert result.exit_code == 2
        assert "FileNotFoundError" in result.output

    def test_invalid_config_file(self, runner, write_config, project):
        write_config(project / "bad.py", """
            config = {"name": "bad", "rules": {"no-print": "fatal"}}
        """)

        result = runner.invoke(main, ['--config', 'bad.py', 'print-config', 'src/app/main.py'])

        assert result.exit_code == 2
        assert "LayerValidationError" in result.output


class TestCheckIgnoredCommand:
    """Test the lintkit check-ignored command"""

    def test_default_ignores(self, runner):
        result = runner.invoke(main, ['check-ignored', 'src/app/main.py', 'src/__pycache__/m.py'])

        assert result.exit_code == 0
        assert "Ignore Status" in result.stdout
        lines = result.stdout.splitlines()
        assert any("src/app/main.py" in line and "linted" in line for line in lines)
        assert any("src/__pycache__/m.py" in line and "ignored" in line for line in lines)

    def test_ignore_pattern_option(self, runner):
        result = runner.invoke(main, ['--ignore-pattern', 'src/lib/**', 'check-ignored', 'src/lib/x.py'])

        assert result.exit_code == 0
        assert "ignored" in result.stdout

    def test_no_ignore(self, runner):
        result = runner.invoke(main, ['--no-ignore', 'check-ignored', 'src/__pycache__/m.py'])

        assert result.exit_code == 0
        assert "linted" in result.stdout
        assert "ignored" not in result.stdout.replace("Ignore Status", "")
