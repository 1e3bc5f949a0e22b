"""BaseService, the foundation for all writenex services.

Every service receives the :class:`Workspace` at construction time and
reaches settings, paths and the cache only through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from writenex.infrastructure.cache import ServerCache
    from writenex.infrastructure.workspace import Workspace


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ContentService(BaseService):
            def delete(self, collection: str, content_id: str) -> ServiceResult:
                ...
                self._cache.handle_file_change("unlink", collection, content_id)
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def _cache(self) -> ServerCache:
        return self._workspace.cache

