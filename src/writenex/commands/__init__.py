"""Subcommand modules for writenex.

register_commands() uses deferred imports to keep ``writenex --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command on the root CLI group."""
    from writenex.commands.collections import collections, detect
    from writenex.commands.content import create, delete, images, list_content, show, update
    from writenex.commands.watch import cache_stats, watch

    cli.add_command(collections)
    cli.add_command(detect)
    cli.add_command(list_content)
    cli.add_command(show)
    cli.add_command(create)
    cli.add_command(update)
    cli.add_command(delete)
    cli.add_command(images)
    cli.add_command(cache_stats)
    cli.add_command(watch)
