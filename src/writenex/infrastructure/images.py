"""Discovery of images colocated with a content item.

Where an item's images live depends on its layout:

- Folder-based (``my-post/index.md``): the item's own folder.
- Flat or date-prefixed (``my-post.md``): a sibling folder named after the
  content id, if one exists.

The folder is scanned recursively (hidden and ``_`` folders skipped, depth
bounded) and each image is reported with a path relative to the content
file, ready to paste into markdown.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel

from writenex.infrastructure.filesystem import find_content_file, is_skipped_dir

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif", ".svg"})

DEFAULT_MAX_DEPTH = 5


class DiscoveredImage(BaseModel):
    """An image file found next to a content item."""

    model_config = {"frozen": True}

    filename: str
    relative_path: str
    absolute_path: str
    size: int
    extension: str


def is_image_file(filename: str) -> bool:
    return Path(filename).suffix.lower() in IMAGE_EXTENSIONS


def get_content_image_folder(
    collection_path: Path, content_id: str, content_file: Path
) -> Path | None:
    """The folder holding *content_id*'s images, or None when there is none."""
    if content_file.name in ("index.md", "index.mdx"):
        return content_file.parent
    sibling = collection_path / content_id
    return sibling if sibling.is_dir() else None


def calculate_relative_path(content_file: Path, image_path: Path) -> str:
    """Markdown-ready path from *content_file* to *image_path*.

    Paths inside the content's directory get a ``./`` prefix; paths that
    climb out with ``..`` are returned unchanged.
    """
    rel = Path(os.path.relpath(image_path, content_file.parent)).as_posix()
    return rel if rel.startswith("..") else f"./{rel}"


def scan_directory_for_images(folder: Path, *, max_depth: int = DEFAULT_MAX_DEPTH) -> list[Path]:
    """Image files under *folder*, at most *max_depth* directory levels deep."""
    found: list[Path] = []

    def _scan(directory: Path, depth: int) -> None:
        if depth >= max_depth:
            return
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Cannot scan %s for images: %s", directory, exc)
            return
        for entry in entries:
            if entry.is_dir():
                if not is_skipped_dir(entry.name):
                    _scan(entry, depth + 1)
            elif entry.is_file() and is_image_file(entry.name):
                found.append(entry)

    if folder.is_dir():
        _scan(folder, 0)
    return found


def discover_content_images(
    collection_path: Path,
    content_id: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[DiscoveredImage]:
    """All images associated with *content_id*.

    An item without an image folder has no images (empty list).

    Raises:
        FileNotFoundError: *content_id* does not exist in the collection.
    """
    content_file = find_content_file(collection_path, content_id)
    if content_file is None:
        msg = f"Content '{content_id}' not found in collection"
        raise FileNotFoundError(msg)

    folder = get_content_image_folder(collection_path, content_id, content_file)
    if folder is None:
        return []

    return [
        DiscoveredImage(
            filename=path.name,
            relative_path=calculate_relative_path(content_file, path),
            absolute_path=str(path),
            size=path.stat().st_size,
            extension=path.suffix.lower(),
        )
        for path in scan_directory_for_images(folder, max_depth=max_depth)
    ]
