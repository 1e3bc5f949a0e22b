"""Collection discovery and naming-pattern detection over the filesystem.

Walks the project's content directory (``src/content`` by default); every
immediate sub-directory is a collection. Each collection's naming pattern
is inferred by :func:`detect_file_pattern`, which feeds relative paths to
the pure scorer in :mod:`writenex.domain.patterns`.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path

from writenex.domain.collections import Collection
from writenex.domain.patterns import DetectionResult, score_paths
from writenex.infrastructure.filesystem import is_skipped_dir, relative_content_paths

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_DIR = "src/content"


def detect_file_pattern(collection_path: Path) -> DetectionResult:
    """Infer the naming pattern used by the files under *collection_path*.

    Never raises: a missing or empty directory yields the flat
    ``{slug}.md`` default with zero confidence.
    """
    paths = relative_content_paths(collection_path)
    result = score_paths(paths)
    logger.debug(
        "Detected pattern %s for %s (%d/%d files)",
        result.pattern,
        collection_path,
        result.match_count,
        result.total_files,
    )
    return result


def _is_ignored(name: str, relative: str, ignore: Iterable[str]) -> bool:
    return any(
        fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(relative, pattern) for pattern in ignore
    )


def discover_collections(
    project_root: Path,
    content_dir: str = DEFAULT_CONTENT_DIR,
    *,
    ignore: Iterable[str] = (),
) -> list[Collection]:
    """List the collections found on disk, sorted by name.

    *ignore* holds glob patterns matched against the directory name and
    its project-relative path.
    """
    content_root = project_root / content_dir
    if not content_root.is_dir():
        logger.debug("No content directory at %s", content_root)
        return []

    ignore = tuple(ignore)
    collections: list[Collection] = []
    for entry in sorted(content_root.iterdir(), key=lambda p: p.name):
        if not entry.is_dir() or is_skipped_dir(entry.name):
            continue
        relative = entry.relative_to(project_root).as_posix()
        if _is_ignored(entry.name, relative, ignore):
            continue

        detection = detect_file_pattern(entry)
        collections.append(
            Collection(
                name=entry.name,
                path=relative,
                file_pattern=detection.pattern,
                count=detection.total_files,
            )
        )
    return collections
