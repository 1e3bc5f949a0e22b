"""Root CLI group for writenex with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from writenex import __version__
from writenex.commands import register_commands
from writenex.commands._context import AppContext
from writenex.config.settings import WritenexSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="writenex")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--root",
    "project_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: directory of writenex.toml, else cwd).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_root: Path | None,
) -> None:
    """writenex: content collections, naming patterns and frontmatter from the shell."""
    settings = WritenexSettings.from_cli(
        config_path=config_path,
        project_root=project_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
