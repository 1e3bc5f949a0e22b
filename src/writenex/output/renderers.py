"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from writenex.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from writenex.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Ids (or names, or image paths) one per line; ``OK: op`` otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    d = result.data
    if isinstance(d.get("items"), list):
        return "\n".join(str(i["id"]) for i in d["items"])
    if isinstance(d.get("collections"), list):
        return "\n".join(str(c["name"]) for c in d["collections"])
    if isinstance(d.get("images"), list):
        return "\n".join(str(i["relative_path"]) for i in d["images"])
    if "pattern" in d:
        return str(d["pattern"])
    if "id" in d:
        return str(d["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="wnx.ok"), Text(f"  {result.op}", style="wnx.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="wnx.key")
    if key == "id":
        v = Text(str(value), style="wnx.id")
    elif key == "path":
        v = Text(str(value), style="wnx.path")
    elif key in ("pattern", "file_pattern"):
        v = Text(str(value), style="wnx.pattern")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), default=str))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span: dict[str, Any], indent: int = 4) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    if span.get("annotations"):
        line += "  (" + ", ".join(f"{k}={v}" for k, v in span["annotations"].items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="wnx.error"),
        Text(f"  {result.op}{code}", style="wnx.op"),
        Text(": "),
        Text(msg),
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Collections ───────────────────────────────────────────────────────


def _render_collections(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    collections = result.data.get("collections", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Name", style="wnx.id", no_wrap=True)
    table.add_column("Path", style="wnx.path")
    table.add_column("Pattern", style="wnx.pattern")
    table.add_column("Items", justify="right")
    if verbose:
        table.add_column("Preview URL", style="dim")

    for c in collections:
        row = [c["name"], c["path"], c["file_pattern"], str(c["count"])]
        if verbose:
            row.append(c.get("preview_url") or "")
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(collections))} collections")
    if verbose:
        _render_meta(console, result)


def _render_collection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.get("collection", {}).items():
        if value is not None:
            _field(console, key, value)


def _render_detection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "collection", d.get("collection"))
    _field(console, "pattern", d.get("pattern"))
    _field(console, "confidence", f"{d.get('confidence', 0.0):.0%}")
    _field(console, "matched", f"{d.get('match_count', 0)}/{d.get('total_files', 0)}")

    samples = d.get("samples", [])
    if samples:
        console.print()
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Sample", style="wnx.path")
        table.add_column("Tokens")
        for s in samples:
            tokens = ", ".join(f"{k}={v}" for k, v in s["extracted"].items())
            table.add_row(s["file_path"], tokens)
        console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Content ───────────────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/delete results."""
    _status_line(console, result)
    for key in ("id", "collection", "path", "file_pattern"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        if "frontmatter" in result.data:
            _field(console, "frontmatter", result.data["frontmatter"])
        _render_meta(console, result)


def _render_single_item(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one content item as a panel: frontmatter lines, then body."""
    d = result.data
    fm: dict[str, Any] = d.get("frontmatter", {})
    lines = [f"{k}: {v}" for k, v in fm.items() if k != "title"]
    if verbose:
        lines.append(f"path: {d.get('path', '')}")

    content = "\n".join(lines)
    body = d.get("body", "")
    if body:
        content += f"\n\n{body.strip()}"

    title = f"{d.get('id', '?')}: {fm.get('title', 'Untitled')}"
    console.print(Panel(Text(content), title=title, border_style="dim", expand=False))


def _render_content_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="wnx.id", no_wrap=True)
    table.add_column("Title", style="wnx.title")
    table.add_column("Date")
    table.add_column("Draft", style="wnx.draft")
    if verbose:
        table.add_column("Excerpt", style="dim")

    for item in items:
        row = [
            item["id"],
            item["title"],
            item.get("pub_date") or "",
            "draft" if item.get("draft") else "",
        ]
        if verbose:
            row.append(item.get("excerpt", ""))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")
    if verbose:
        _render_meta(console, result)


def _render_images(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    images = result.data.get("images", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("File", style="wnx.id")
    table.add_column("Markdown path", style="wnx.path")
    table.add_column("Size", justify="right")
    for image in images:
        table.add_row(image["filename"], image["relative_path"], f"{image['size']:,}")
    console.print(table)
    console.print(f"\n{result.data.get('count', len(images))} images")
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_collections": _render_collections,
    "get_collection": _render_collection,
    "detect_pattern": _render_detection,
    "create_content": _render_mutation,
    "update_content": _render_mutation,
    "delete_content": _render_mutation,
    "get_content": _render_single_item,
    "list_content": _render_content_table,
    "list_images": _render_images,
}
