"""Commands: list, show, create, update and delete content; list images."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from writenex.commands._base import WritenexCommand, parse_assignments, parse_tokens
from writenex.services.content import ContentService
from writenex.services.images import ImageService

if TYPE_CHECKING:
    from writenex.commands._context import AppContext


def _read_body(body: str | None, body_file: Path | None) -> str | None:
    if body is not None and body_file is not None:
        raise click.UsageError("Use either --body or --body-file, not both.")
    if body_file is not None:
        return body_file.read_text(encoding="utf-8")
    return body


_body_options = [
    click.option("--body", default=None, help="Markdown body text."),
    click.option(
        "--body-file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Read the markdown body from a file.",
    ),
]


def _with_body_options(func: Any) -> Any:
    for option in reversed(_body_options):
        func = option(func)
    return func


@click.command(
    "list",
    cls=WritenexCommand,
    examples="""\
  writenex list blog
  writenex list blog --no-drafts --sort title --order asc
  writenex -q list blog""",
)
@click.argument("collection")
@click.option("--drafts/--no-drafts", default=True, help="Include draft items.")
@click.option("--sort", "sort_by", default="pubDate", show_default=True, help="Frontmatter field.")
@click.option(
    "--order",
    type=click.Choice(["asc", "desc"]),
    default="desc",
    show_default=True,
)
@click.pass_obj
def list_content(app: AppContext, collection: str, drafts: bool, sort_by: str, order: str) -> None:
    """List the items of COLLECTION."""
    result = ContentService(app.workspace).list_content(
        collection,
        include_drafts=drafts,
        sort_by=sort_by,
        order=order,  # type: ignore[arg-type]
    )
    app.emit(result)


@click.command(cls=WritenexCommand)
@click.argument("collection")
@click.argument("content_id")
@click.pass_obj
def show(app: AppContext, collection: str, content_id: str) -> None:
    """Show one item with its frontmatter and body."""
    app.emit(ContentService(app.workspace).get(collection, content_id))


@click.command(
    cls=WritenexCommand,
    examples="""\
  writenex create blog --title "My First Post!"
  writenex create blog --title "Hola" --set lang=es --set pubDate=2024-06-05
  writenex create docs --title "Setup" --pattern "{category}/{slug}.md" --token category=guides
  writenex create blog --title "Draft" --set draft=true --body-file draft.md""",
)
@click.argument("collection")
@click.option("--title", default=None, help="Title (also the base of the slug).")
@click.option("--slug", default=None, help="Explicit slug instead of one derived from the title.")
@click.option("--pattern", "file_pattern", default=None, help="Override the naming pattern.")
@click.option("--set", "assignments", multiple=True, help="Frontmatter KEY=VALUE (repeatable).")
@click.option("--token", "tokens", multiple=True, help="Pattern token KEY=VALUE (repeatable).")
@_with_body_options
@click.pass_obj
def create(
    app: AppContext,
    collection: str,
    title: str | None,
    slug: str | None,
    file_pattern: str | None,
    assignments: tuple[str, ...],
    tokens: tuple[str, ...],
    body: str | None,
    body_file: Path | None,
) -> None:
    """Create a new item in COLLECTION."""
    frontmatter = parse_assignments(assignments)
    if title is not None:
        frontmatter = {"title": title, **frontmatter}

    result = ContentService(app.workspace).create(
        collection,
        frontmatter=frontmatter,
        body=_read_body(body, body_file) or "",
        slug=slug,
        file_pattern=file_pattern,
        custom_tokens=parse_tokens(tokens) or None,
    )
    app.emit(result)


@click.command(
    cls=WritenexCommand,
    examples="""\
  writenex update blog my-first-post --set draft=false
  writenex update blog my-first-post --body-file post.md""",
)
@click.argument("collection")
@click.argument("content_id")
@click.option("--set", "assignments", multiple=True, help="Frontmatter KEY=VALUE (repeatable).")
@_with_body_options
@click.pass_obj
def update(
    app: AppContext,
    collection: str,
    content_id: str,
    assignments: tuple[str, ...],
    body: str | None,
    body_file: Path | None,
) -> None:
    """Merge frontmatter changes into an item, optionally replacing its body."""
    result = ContentService(app.workspace).update(
        collection,
        content_id,
        frontmatter=parse_assignments(assignments) or None,
        body=_read_body(body, body_file),
    )
    app.emit(result)


@click.command(cls=WritenexCommand)
@click.argument("collection")
@click.argument("content_id")
@click.pass_obj
def delete(app: AppContext, collection: str, content_id: str) -> None:
    """Delete an item's file."""
    app.emit(ContentService(app.workspace).delete(collection, content_id))


@click.command(cls=WritenexCommand)
@click.argument("collection")
@click.argument("content_id")
@click.pass_obj
def images(app: AppContext, collection: str, content_id: str) -> None:
    """List images stored next to an item."""
    app.emit(ImageService(app.workspace).list_images(collection, content_id))
