"""
CLI commands for lintkit.

Provides the `lintkit` command-line interface for inspecting which config file
governs a path, what configuration applies to a file, and which files are
ignored.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from config.defaults import get_default_configs
from config.loader import ConfigLoader, LegacyConfigLoader
from core.models.config import GlobalSettings, LoaderOptions
from lintkit import __version__

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True
    )


def _run(ctx: click.Context, coro: Awaitable[Any]) -> Any:
    """Run a loader coroutine, turning failures into a clean exit"""
    try:
        return asyncio.run(coro)
    except Exception as e:
        if ctx.obj.get("debug"):
            err_console.print_exception()
        err_console.print(f"[red]❌ {escape(type(e).__name__)}: {escape(str(e))}[/red]")
        sys.exit(2)


@click.group()
@click.version_option(version=__version__, prog_name="lintkit")
@click.option(
    '--config', '-c', 'config_file',
    type=click.Path(dir_okay=False),
    help='Use this config file instead of searching for one'
)
@click.option(
    '--no-config-lookup',
    is_flag=True,
    help='Do not use any config file'
)
@click.option(
    '--ignore-pattern',
    multiple=True,
    help='Additional ignore pattern, relative to the current directory (repeatable; blank patterns are skipped)'
)
@click.option(
    '--no-ignore',
    is_flag=True,
    help='Disable ignore patterns'
)
@click.option(
    '--legacy-lookup',
    is_flag=True,
    help='Use the first config file found for every path'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Show debug logging'
)
@click.pass_context
def main(
    ctx: click.Context,
    config_file: Optional[str],
    no_config_lookup: bool,
    ignore_pattern: Tuple[str, ...],
    no_ignore: bool,
    legacy_lookup: bool,
    debug: bool
):
    """
    lintkit CLI.

    Inspect config file lookup and the layered configuration for files.
    """
    if config_file and no_config_lookup:
        raise click.UsageError("--config and --no-config-lookup cannot be used together")

    settings = GlobalSettings()
    _configure_logging("DEBUG" if debug else settings.log_level)

    config_file_path: Any = None
    if no_config_lookup:
        config_file_path = False
    elif config_file:
        config_file_path = config_file

    options = LoaderOptions.from_settings(
        settings,
        cwd=Path.cwd(),
        config_file_path=config_file_path,
        ignore_enabled=False if no_ignore else None,
        ignore_patterns=list(ignore_pattern),
        default_configs=get_default_configs()
    )

    loader_class = LegacyConfigLoader if (legacy_lookup or settings.legacy_lookup) else ConfigLoader
    logger.debug(f"Using {loader_class.__name__} with cwd {options.cwd}")

    ctx.obj = {
        "loader": loader_class(options),
        "debug": debug
    }


@main.command('find-config')
@click.argument('path', type=click.Path(exists=True))
@click.pass_context
def find_config(ctx: click.Context, path: str):
    """Show the config file that governs PATH."""
    loader: ConfigLoader = ctx.obj["loader"]

    if Path(path).is_dir():
        config_path = _run(ctx, loader.find_config_file_for_directory(path))
    else:
        config_path = _run(ctx, loader.find_config_file_for_file(path))

    if config_path is None:
        console.print("[yellow]No config file in use[/yellow]")
    else:
        click.echo(str(config_path))


@main.command('print-config')
@click.argument('file', type=click.Path(dir_okay=False))
@click.pass_context
def print_config(ctx: click.Context, file: str):
    """Print the merged configuration for FILE as JSON."""
    loader: ConfigLoader = ctx.obj["loader"]

    config_array = _run(ctx, loader.load_config_array_for_file(file))
    config = config_array.get_config(Path(file).absolute())

    if config is None:
        click.echo("null")
        return

    click.echo(json.dumps(
        config.model_dump(exclude={"name", "files", "ignores"}),
        indent=2,
        default=str
    ))


@main.command('check-ignored')
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_context
def check_ignored(ctx: click.Context, files: Tuple[str, ...]):
    """Report whether each of FILES is ignored."""
    loader: ConfigLoader = ctx.obj["loader"]

    async def check_all():
        results = []
        for file in files:
            config_array = await loader.load_config_array_for_file(file)
            results.append((file, config_array.is_file_ignored(Path(file).absolute())))
        return results

    results = _run(ctx, check_all())

    table = Table(title="Ignore Status")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")

    for file, ignored in results:
        status = "[yellow]ignored[/yellow]" if ignored else "[green]linted[/green]"
        table.add_row(escape(file), status)

    console.print(table)


if __name__ == "__main__":
    main()
