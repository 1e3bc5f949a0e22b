"""Content directory watcher.

Translates raw watchdog events under the content root into
:class:`FileChangeEvent` records and hands them to a callback, normally
:meth:`ServerCache.handle_file_change
<writenex.infrastructure.cache.ServerCache.handle_file_change>`.

Architecture::

    ContentWatcher (lifecycle)
        └── ContentEventHandler (filtering, event -> FileChangeEvent)
                └── watchdog.Observer (OS-level monitoring, own thread)

The callback runs on the observer thread.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from writenex.domain.patterns import is_content_file
from writenex.infrastructure.filesystem import extract_slug, is_skipped_dir

logger = structlog.get_logger(__name__)

ChangeType = Literal["add", "change", "unlink"]


@dataclass(frozen=True)
class FileChangeEvent:
    """A content file change, already attributed to its collection."""

    type: ChangeType
    collection: str
    content_id: str | None = None
    path: str | None = None


def event_for_path(
    content_root: Path, path: Path, change_type: ChangeType
) -> FileChangeEvent | None:
    """Build the event for *path*, or None when it is not a content file.

    The collection is the first path segment below *content_root*; files
    directly in the content root belong to no collection.
    """
    if not is_content_file(path.name):
        return None
    try:
        relative = path.relative_to(content_root)
    except ValueError:
        return None
    if len(relative.parts) < 2:
        return None
    if any(is_skipped_dir(part) for part in relative.parts[:-1]):
        return None

    collection = relative.parts[0]
    content_id = extract_slug(path, content_root / collection)
    return FileChangeEvent(
        type=change_type,
        collection=collection,
        content_id=content_id,
        path=str(path),
    )


class ContentEventHandler(FileSystemEventHandler):
    """Maps watchdog events to :class:`FileChangeEvent` callbacks.

    created -> ``add``, modified -> ``change``, deleted -> ``unlink``.
    A move is an ``unlink`` of the source followed by an ``add`` of the
    destination. Directory events are ignored.
    """

    def __init__(self, content_root: Path, on_change: Callable[[FileChangeEvent], None]) -> None:
        self.content_root = content_root
        self.on_change = on_change

    def _emit(self, src: str | bytes, change_type: ChangeType) -> None:
        path = Path(src.decode() if isinstance(src, bytes) else src)
        event = event_for_path(self.content_root, path, change_type)
        if event is None:
            return
        logger.debug(
            "content_changed",
            change=event.type,
            collection=event.collection,
            content_id=event.content_id,
        )
        try:
            self.on_change(event)
        except Exception:
            # An exception here would kill the observer thread.
            logger.exception("change_callback_failed", path=event.path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, "add")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, "change")

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, "unlink")

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._emit(event.src_path, "unlink")
        self._emit(event.dest_path, "add")


class ContentWatcher:
    """Start/stop wrapper around a recursive watchdog observer."""

    def __init__(self, content_root: Path, on_change: Callable[[FileChangeEvent], None]) -> None:
        self.content_root = content_root
        self.on_change = on_change
        self._observer: Observer | None = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Begin watching. A second call while running is a no-op."""
        if self._observer is not None:
            logger.warning("watcher_already_running", root=str(self.content_root))
            return

        handler = ContentEventHandler(self.content_root, self.on_change)
        observer = Observer()
        observer.schedule(handler, str(self.content_root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("watcher_started", root=str(self.content_root))

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the observer thread. Safe to call when not running."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=timeout)
        self._observer = None
        logger.info("watcher_stopped", root=str(self.content_root))
