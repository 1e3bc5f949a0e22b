"""Filesystem operations for content collections.

INVARIANT: Files are truth. Nothing here keeps state between calls; the
cache in :mod:`writenex.infrastructure.cache` is the only memory.

Pure parsing/rendering lives in :mod:`writenex.domain.content` and pattern
logic in :mod:`writenex.domain.patterns`. This module does the actual I/O:
scanning, reading, writing, unique-name generation and deletion.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from writenex.domain.content import (
    ContentItem,
    ContentSummary,
    FrontmatterError,
    parse_frontmatter,
    render_frontmatter,
    to_summary,
)
from writenex.domain.patterns import (
    DEFAULT_PATTERN,
    generate_path_from_pattern,
    is_content_file,
    is_folder_pattern,
    is_valid_pattern,
)
from writenex.domain.slugs import slug_from_title
from writenex.domain.tokens import resolve_pattern_tokens

logger = logging.getLogger(__name__)

# Exclusive-create retries when a concurrent writer claims the same name.
MAX_CREATE_ATTEMPTS = 20

_INDEX_NAMES = frozenset({"index.md", "index.mdx"})


def is_skipped_dir(name: str) -> bool:
    """Hidden (``.git``) and special (``_drafts``) directories are never scanned."""
    return name.startswith((".", "_"))


def ensure_within(root: Path, path: Path) -> Path:
    """Return *path* if it resolves inside *root*, else raise ``ValueError``."""
    if not path.resolve().is_relative_to(root.resolve()):
        msg = f"Path escapes collection root: {path}"
        raise ValueError(msg)
    return path


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)


def list_content_files(collection_path: Path) -> list[Path]:
    """All ``.md``/``.mdx`` files under *collection_path*, sorted.

    Skipped directories are pruned from the walk. A missing directory
    yields an empty list.
    """
    if not collection_path.is_dir():
        return []

    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(collection_path, onerror=_log_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not is_skipped_dir(d))
        results.extend(Path(dirpath) / name for name in filenames if is_content_file(name))
    return sorted(results)


def relative_content_paths(collection_path: Path) -> list[str]:
    """Content file paths relative to the collection, POSIX-style."""
    return [p.relative_to(collection_path).as_posix() for p in list_content_files(collection_path)]


def count_content_files(collection_path: Path) -> int:
    return len(list_content_files(collection_path))


def extract_slug(file_path: Path, collection_path: Path) -> str:
    """Content id for *file_path*.

    - ``my-post.md`` -> ``my-post``
    - ``2024-01-15-my-post.md`` -> ``2024-01-15-my-post``
    - ``my-post/index.md`` -> ``my-post``
    """
    relative = file_path.relative_to(collection_path)
    if relative.name in _INDEX_NAMES and len(relative.parts) >= 2:
        return relative.parts[-2]
    return relative.stem


def find_content_file(collection_path: Path, content_id: str) -> Path | None:
    """Locate the file backing *content_id*.

    Tries ``{id}/index.md(x)`` and ``{id}.md(x)`` first, then falls back to
    the first file whose extracted slug equals *content_id* (nested
    patterns such as ``{year}/{slug}.md``).
    """
    if not content_id or "\0" in content_id:
        return None

    candidates = (
        collection_path / content_id / "index.md",
        collection_path / content_id / "index.mdx",
        collection_path / f"{content_id}.md",
        collection_path / f"{content_id}.mdx",
    )
    for candidate in candidates:
        if candidate.is_file():
            try:
                return ensure_within(collection_path, candidate)
            except ValueError:
                return None

    for path in list_content_files(collection_path):
        if extract_slug(path, collection_path) == content_id:
            return path
    return None


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_content_file(file_path: Path, collection_path: Path) -> ContentItem:
    """Read and parse one content file.

    Raises:
        FileNotFoundError: The file does not exist.
        FrontmatterError: The frontmatter block is not valid YAML.
    """
    raw = file_path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(raw)
    return ContentItem(
        id=extract_slug(file_path, collection_path),
        path=str(file_path),
        frontmatter=frontmatter,
        body=body,
        raw=raw,
    )


def _sort_items(
    items: list[ContentItem], sort_by: str, order: Literal["asc", "desc"]
) -> list[ContentItem]:
    present = [i for i in items if i.frontmatter.get(sort_by) is not None]
    missing = [i for i in items if i.frontmatter.get(sort_by) is None]
    present.sort(key=lambda i: str(i.frontmatter[sort_by]), reverse=order == "desc")
    return missing + present if order == "asc" else present + missing


def read_collection(
    collection_path: Path,
    *,
    include_drafts: bool = True,
    sort_by: str | None = None,
    order: Literal["asc", "desc"] = "desc",
) -> list[ContentItem]:
    """Read every content file of a collection.

    Files that cannot be read or parsed are skipped with a warning.
    """
    items: list[ContentItem] = []
    for path in list_content_files(collection_path):
        try:
            item = read_content_file(path, collection_path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            logger.warning("Skipping unreadable content file %s: %s", path, exc)
            continue
        if not include_drafts and item.frontmatter.get("draft") is True:
            continue
        items.append(item)

    if sort_by:
        items = _sort_items(items, sort_by, order)
    return items


def get_collection_summaries(
    collection_path: Path,
    *,
    include_drafts: bool = True,
    sort_by: str | None = None,
    order: Literal["asc", "desc"] = "desc",
) -> list[ContentSummary]:
    items = read_collection(
        collection_path, include_drafts=include_drafts, sort_by=sort_by, order=order
    )
    return [to_summary(item) for item in items]


# ---------------------------------------------------------------------------
# Unique names
# ---------------------------------------------------------------------------


def pattern_target(
    collection_path: Path, file_pattern: str, tokens: Mapping[str, str]
) -> Path:
    """Absolute location of *file_pattern* filled with *tokens*.

    Tokens that resolve to ``""`` leave empty segments behind
    (``{series}/{slug}.md`` becomes ``/hello.md``); those are dropped so the
    result always stays anchored at *collection_path*.
    """
    relative = generate_path_from_pattern(file_pattern, tokens)
    return collection_path.joinpath(*[part for part in relative.split("/") if part])


def _target_for(
    slug: str,
    collection_path: Path,
    file_pattern: str,
    tokens: Mapping[str, str] | None,
) -> Path:
    values = {**(tokens or {}), "slug": slug}
    target = pattern_target(collection_path, file_pattern, values)
    # Folder-based items own their whole directory.
    return target.parent if is_folder_pattern(file_pattern) else target


def content_exists(
    slug: str,
    collection_path: Path,
    file_pattern: str = DEFAULT_PATTERN,
    *,
    tokens: Mapping[str, str] | None = None,
) -> bool:
    """True if something already occupies *slug*'s location under *file_pattern*.

    *tokens* supplies the non-slug placeholder values (date, lang, ...).
    """
    return _target_for(slug, collection_path, file_pattern, tokens).exists()


def generate_unique_slug(
    base_slug: str,
    collection_path: Path,
    file_pattern: str = DEFAULT_PATTERN,
    *,
    tokens: Mapping[str, str] | None = None,
) -> str:
    """Return *base_slug*, or ``base_slug-N`` (N = 2, 3, ...) if taken."""
    slug = base_slug
    counter = 2
    while content_exists(slug, collection_path, file_pattern, tokens=tokens):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreatedContent:
    """Where a newly created item landed.

    ``id`` is the content id readers see (``2024-01-15-hello`` for a
    date-prefixed file); ``slug`` is the unique slug substituted into the
    pattern.
    """

    id: str
    slug: str
    path: Path
    file_pattern: str


def write_content_file(path: Path, frontmatter: Mapping[str, Any], body: str) -> None:
    """Write (or overwrite) a content file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frontmatter(frontmatter, body), encoding="utf-8")


def create_content_file(path: Path, frontmatter: Mapping[str, Any], body: str) -> None:
    """Write a new content file, failing if *path* already exists.

    Raises:
        FileExistsError: Another writer got there first.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("x", encoding="utf-8") as fh:
        fh.write(render_frontmatter(frontmatter, body))


def create_content(
    collection_path: Path,
    *,
    frontmatter: Mapping[str, Any],
    body: str = "",
    slug: str | None = None,
    file_pattern: str = DEFAULT_PATTERN,
    custom_tokens: Mapping[str, str] | None = None,
) -> CreatedContent:
    """Create a new content file following *file_pattern*.

    VALIDATE -> SLUG -> RESOLVE -> UNIQUE -> PERSIST

    Raises:
        ValueError: *file_pattern* is invalid, or resolves outside the
            collection.
        OSError: The file could not be written.
    """
    valid, reason = is_valid_pattern(file_pattern)
    if not valid:
        msg = f"Invalid file pattern: {reason}"
        raise ValueError(msg)

    base_slug = slug_from_title(frontmatter.get("title"), explicit=slug)
    tokens = resolve_pattern_tokens(file_pattern, base_slug, frontmatter, custom_tokens)

    for _attempt in range(MAX_CREATE_ATTEMPTS):
        unique = generate_unique_slug(base_slug, collection_path, file_pattern, tokens=tokens)
        tokens["slug"] = unique
        file_path = ensure_within(
            collection_path, pattern_target(collection_path, file_pattern, tokens)
        )
        try:
            create_content_file(file_path, frontmatter, body)
        except FileExistsError:
            logger.debug("Lost race for %s, retrying with a new slug", file_path)
            continue
        return CreatedContent(
            id=extract_slug(file_path, collection_path),
            slug=unique,
            path=file_path,
            file_pattern=file_pattern,
        )

    msg = f"Could not find a free name for {base_slug!r} after {MAX_CREATE_ATTEMPTS} attempts"
    raise FileExistsError(msg)


def update_content(
    file_path: Path,
    collection_path: Path,
    *,
    frontmatter: Mapping[str, Any] | None = None,
    body: str | None = None,
) -> ContentItem:
    """Read-merge-write an existing item in place.

    Supplied frontmatter keys overwrite, new keys are added, omitted keys
    are preserved. The file is never renamed.
    """
    existing = read_content_file(file_path, collection_path)
    merged = {**existing.frontmatter, **(frontmatter or {})}
    new_body = existing.body if body is None else body
    write_content_file(file_path, merged, new_body)
    return read_content_file(file_path, collection_path)


def delete_content(file_path: Path) -> None:
    """Remove a content file.

    Raises:
        FileNotFoundError: Nothing to delete.
    """
    if not file_path.is_file():
        msg = f"Content file not found: {file_path}"
        raise FileNotFoundError(msg)
    file_path.unlink()
