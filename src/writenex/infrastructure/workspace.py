"""Workspace: the explicitly constructed owner of per-process state.

One Workspace per server process. It holds the frozen settings and the
single :class:`ServerCache`, and is passed to every service and to the
watcher. Nothing in writenex keeps module-level state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from writenex.config.settings import WritenexSettings
from writenex.infrastructure.cache import ServerCache
from writenex.infrastructure.watcher import ContentWatcher, FileChangeEvent

logger = logging.getLogger(__name__)


class Workspace:
    """Settings, paths and cache for one writenex project."""

    def __init__(self, settings: WritenexSettings, *, cache: ServerCache | None = None) -> None:
        self.settings = settings
        self.cache = cache or ServerCache(ttl=settings.cache.ttl_seconds)
        self._watcher: ContentWatcher | None = None

    @property
    def project_root(self) -> Path:
        return self.settings.project_root

    @property
    def content_root(self) -> Path:
        return self.settings.content_root

    def resolve(self, relative: str) -> Path:
        """A project-relative path as an absolute one."""
        return self.project_root / relative

    @property
    def watcher(self) -> ContentWatcher | None:
        return self._watcher

    def attach_watcher(
        self, on_event: Callable[[FileChangeEvent], None] | None = None
    ) -> ContentWatcher:
        """Create (not start) a watcher that feeds this workspace's cache.

        *on_event* is called after the cache has been invalidated. The cache
        switches to the long watcher TTL immediately.
        """
        if self._watcher is None:
            cache = self.cache

            def _invalidate(event: FileChangeEvent) -> None:
                cache.handle_file_change(event.type, event.collection, event.content_id)
                if on_event is not None:
                    on_event(event)

            self._watcher = ContentWatcher(self.content_root, _invalidate)
            cache.enable_watcher()
            logger.debug("Watcher attached to %s", self.content_root)
        return self._watcher

    def close(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
