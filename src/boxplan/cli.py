"""Root CLI group for boxplan with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from boxplan import __version__
from boxplan.commands import register_commands
from boxplan.commands._context import AppContext
from boxplan.config.settings import BoxplanSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="boxplan")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-l",
    "--layout",
    "layout_path",
    default=None,
    type=click.Path(path_type=Path),
    help="Layout document to load instead of [board] layout.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    layout_path: Path | None,
) -> None:
    """boxplan: reactive containment board for course planning."""
    flags: dict[str, object] = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
    }
    if layout_path is not None:
        flags["layout_path"] = layout_path.resolve()
    settings = BoxplanSettings.from_cli(config_path=config_path, **flags)
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
