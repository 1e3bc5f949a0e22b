"""CollectionService: collection listing and naming-pattern detection.

The merged collections list is cached; detection always rescans.
"""

from __future__ import annotations

import logging

from writenex.domain.collections import Collection, merge_collections
from writenex.infrastructure.discovery import detect_file_pattern, discover_collections
from writenex.services.base import BaseService
from writenex.services.result import (
    DISCOVERY_FAILED,
    NOT_FOUND,
    ServiceError,
    ServiceResult,
)
from writenex.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class CollectionService(BaseService):
    """Lists collections and infers their naming patterns."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def list_collections(self) -> ServiceResult:
        """All collections, discovered and configured, merged."""
        try:
            collections, cached = self._collections_with_source()
        except OSError as exc:
            logger.warning("Collection discovery failed: %s", exc)
            return ServiceResult(
                ok=False,
                op="list_collections",
                error=ServiceError(code=DISCOVERY_FAILED, message=str(exc)),
            )

        return ServiceResult(
            ok=True,
            op="list_collections",
            data={
                "collections": [c.model_dump(mode="json", by_alias=True) for c in collections],
                "count": len(collections),
            },
            meta={"cached": cached},
        )

    @traced
    def get_collection(self, name: str) -> ServiceResult:
        try:
            collection = self.find(name)
        except OSError as exc:
            logger.warning("Collection discovery failed: %s", exc)
            return ServiceResult(
                ok=False,
                op="get_collection",
                error=ServiceError(code=DISCOVERY_FAILED, message=str(exc)),
            )
        if collection is None:
            return ServiceResult(
                ok=False,
                op="get_collection",
                error=ServiceError(
                    code=NOT_FOUND,
                    message=f"Collection '{name}' not found",
                    detail={"collection": name},
                ),
            )
        return ServiceResult(
            ok=True,
            op="get_collection",
            data={"collection": collection.model_dump(mode="json", by_alias=True)},
        )

    @traced
    def detect_pattern(self, name: str) -> ServiceResult:
        """Rescan *name* and report the inferred pattern with samples.

        Works for any directory under the content root, even one excluded
        from the collections list.
        """
        collection = None
        try:
            collection = self.find(name)
        except OSError as exc:
            logger.debug("Collection lookup failed, falling back to content root: %s", exc)

        if collection is not None:
            path = self._workspace.resolve(collection.path)
        else:
            path = self._workspace.content_root / name
        if not path.is_dir():
            return ServiceResult(
                ok=False,
                op="detect_pattern",
                error=ServiceError(
                    code=NOT_FOUND,
                    message=f"Collection '{name}' not found",
                    detail={"collection": name},
                ),
            )

        with trace_span("detect"):
            detection = detect_file_pattern(path)

        warnings: list[str] = []
        if collection is not None and collection.file_pattern != detection.pattern:
            warnings.append(
                f"Configured pattern {collection.file_pattern!r} differs from "
                f"detected {detection.pattern!r}"
            )
        return ServiceResult(
            ok=True,
            op="detect_pattern",
            data={"collection": name, **detection.model_dump(mode="json")},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Lookups used by other services (raise OSError)
    # ------------------------------------------------------------------

    def find(self, name: str) -> Collection | None:
        collections, _ = self._collections_with_source()
        return next((c for c in collections if c.name == name), None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _collections_with_source(self) -> tuple[list[Collection], bool]:
        cached = self._cache.get_collections()
        if cached is not None:
            return cached, True

        generation = self._cache.collections_generation()
        settings = self._workspace.settings
        with trace_span("discover"):
            if settings.discovery.enabled:
                discovered = discover_collections(
                    settings.project_root,
                    settings.content_dir,
                    ignore=settings.discovery.ignore,
                )
            else:
                discovered = self._scan_configured()

        with trace_span("merge"):
            collections = merge_collections(discovered, settings.collections)

        self._cache.set_collections(collections, generation=generation)
        return collections, False

    def _scan_configured(self) -> list[Collection]:
        """Counts and detected patterns for configured collections only."""
        scanned: list[Collection] = []
        for cfg in self._workspace.settings.collections:
            path = self._workspace.resolve(cfg.path)
            if not path.is_dir():
                continue
            detection = detect_file_pattern(path)
            scanned.append(
                Collection(
                    name=cfg.name,
                    path=cfg.path,
                    file_pattern=detection.pattern,
                    count=detection.total_files,
                )
            )
        return scanned
