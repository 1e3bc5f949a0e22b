"""Commands: watch the content directory; show cache state."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import click

from writenex.commands._base import WritenexCommand
from writenex.services.collections import CollectionService
from writenex.services.result import ServiceResult

if TYPE_CHECKING:
    from writenex.commands._context import AppContext
    from writenex.infrastructure.watcher import FileChangeEvent


@click.command("cache-stats", cls=WritenexCommand)
@click.option("--warm", is_flag=True, help="List collections first so the cache holds data.")
@click.pass_obj
def cache_stats(app: AppContext, warm: bool) -> None:
    """Show which cache partitions hold valid data in this process."""
    workspace = app.workspace
    if warm:
        warmed = CollectionService(workspace).list_collections()
        if not warmed.ok:
            app.emit(warmed)
    app.emit(ServiceResult(ok=True, op="cache_stats", data=workspace.cache.get_stats()))


@click.command(
    cls=WritenexCommand,
    examples="""\
  writenex watch
  writenex -v --log-json watch
  writenex watch --timeout 60""",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Stop after this many seconds (default: until interrupted).",
)
@click.pass_obj
def watch(app: AppContext, timeout: float | None) -> None:
    """Watch the content directory and invalidate the cache on changes."""
    workspace = app.workspace
    if not workspace.content_root.is_dir():
        raise click.ClickException(f"Content directory not found: {workspace.content_root}")

    def _echo(event: FileChangeEvent) -> None:
        if not app.settings.quiet:
            click.echo(f"{event.type:<7} {event.collection}/{event.content_id}")

    watcher = workspace.attach_watcher(on_event=_echo)
    watcher.start()
    click.echo(f"Watching {workspace.content_root} (Ctrl+C to stop)", err=True)
    deadline = None if timeout is None else time.monotonic() + timeout
    try:
        while deadline is None or time.monotonic() < deadline:
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        workspace.close()
