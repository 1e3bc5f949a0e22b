"""Commands: list collections and detect naming patterns."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from writenex.commands._base import WritenexCommand
from writenex.services.collections import CollectionService

if TYPE_CHECKING:
    from writenex.commands._context import AppContext


@click.command(
    cls=WritenexCommand,
    examples="""\
  writenex collections
  writenex --json collections
  writenex -q collections""",
)
@click.pass_obj
def collections(app: AppContext) -> None:
    """List content collections with their naming patterns."""
    app.emit(CollectionService(app.workspace).list_collections())


@click.command(
    cls=WritenexCommand,
    examples="""\
  writenex detect blog
  writenex -v detect docs""",
)
@click.argument("collection")
@click.pass_obj
def detect(app: AppContext, collection: str) -> None:
    """Infer the file naming pattern of COLLECTION from its files."""
    app.emit(CollectionService(app.workspace).detect_pattern(collection))
