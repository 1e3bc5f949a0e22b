"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the lazily built Workspace and centralizes
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from writenex.config.logging import configure_logging
from writenex.output.formatters import format_result
from writenex.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from writenex.config.settings import WritenexSettings
    from writenex.infrastructure.workspace import Workspace
    from writenex.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help`` never touches the
    filesystem.
    """

    def __init__(self, settings: WritenexSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from writenex.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with code 1.

        Warnings go to stderr so they don't pollute piped output (in JSON
        mode they are already part of the payload).
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
