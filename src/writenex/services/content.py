"""ContentService: create, read, update, delete and list content items.

Create pipeline: LOCATE → PATTERN → VALIDATE → PERSIST → INVALIDATE → RESPOND

Every write tells the cache exactly which partitions went stale:
create → ``add``, update → ``change``, delete → ``unlink``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from writenex.domain.collections import Collection
from writenex.domain.content import FrontmatterError
from writenex.domain.patterns import is_valid_pattern
from writenex.infrastructure.filesystem import (
    create_content,
    delete_content,
    find_content_file,
    get_collection_summaries,
    read_content_file,
    update_content,
)
from writenex.services.base import BaseService
from writenex.services.collections import CollectionService
from writenex.services.result import (
    DELETE_FAILED,
    DISCOVERY_FAILED,
    INVALID_INPUT,
    INVALID_PATH,
    INVALID_PATTERN,
    NOT_FOUND,
    READ_FAILED,
    WRITE_FAILED,
    ServiceError,
    ServiceResult,
)
from writenex.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

# Only this query shape is served from (and stored into) the cache.
_DEFAULT_QUERY = (True, "pubDate", "desc")


class ContentService(BaseService):
    """File-backed content operations for one workspace."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def create(
        self,
        collection: str,
        *,
        frontmatter: Mapping[str, Any],
        body: str = "",
        slug: str | None = None,
        file_pattern: str | None = None,
        custom_tokens: Mapping[str, str] | None = None,
    ) -> ServiceResult:
        """Create a new item, naming it after the collection's pattern.

        The pattern is *file_pattern* if given, else the configured one,
        else the one detected from existing files.
        """
        op = "create_content"

        if not isinstance(frontmatter, Mapping):
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=INVALID_INPUT, message="Frontmatter must be a mapping"),
            )

        # ── LOCATE ────────────────────────────────────────────────
        located = self._locate(op, collection)
        if isinstance(located, ServiceResult):
            return located
        entry, collection_path = located

        # ── PATTERN / VALIDATE ────────────────────────────────────
        with trace_span("validate"):
            pattern = file_pattern or entry.file_pattern
            valid, reason = is_valid_pattern(pattern)
            if not valid:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code=INVALID_PATTERN,
                        message=f"Invalid file pattern {pattern!r}: {reason}",
                        detail={"file_pattern": pattern},
                    ),
                )

        # ── PERSIST ───────────────────────────────────────────────
        with trace_span("persist"):
            try:
                created = create_content(
                    collection_path,
                    frontmatter=frontmatter,
                    body=body,
                    slug=slug,
                    file_pattern=pattern,
                    custom_tokens=custom_tokens,
                )
            except ValueError as exc:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(code=INVALID_PATH, message=str(exc)),
                )
            except OSError as exc:
                logger.warning("Create failed in %s: %s", collection_path, exc)
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(code=WRITE_FAILED, message=str(exc)),
                )

        # ── INVALIDATE ────────────────────────────────────────────
        self._cache.handle_file_change("add", collection, created.id)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": created.id,
                "slug": created.slug,
                "path": str(created.path),
                "collection": collection,
                "file_pattern": created.file_pattern,
            },
        )

    @traced
    def get(self, collection: str, content_id: str) -> ServiceResult:
        op = "get_content"
        located = self._locate_item(op, collection, content_id)
        if isinstance(located, ServiceResult):
            return located
        file_path, collection_path = located

        try:
            item = read_content_file(file_path, collection_path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            logger.warning("Read failed for %s: %s", file_path, exc)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=READ_FAILED, message=str(exc)),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"collection": collection, **item.model_dump()},
        )

    @traced
    def update(
        self,
        collection: str,
        content_id: str,
        *,
        frontmatter: Mapping[str, Any] | None = None,
        body: str | None = None,
    ) -> ServiceResult:
        """Merge *frontmatter* into the item and optionally replace its body.

        Keys not mentioned in *frontmatter* are kept. The file is rewritten
        in place and never renamed.
        """
        op = "update_content"
        if frontmatter is not None and not isinstance(frontmatter, Mapping):
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=INVALID_INPUT, message="Frontmatter must be a mapping"),
            )

        located = self._locate_item(op, collection, content_id)
        if isinstance(located, ServiceResult):
            return located
        file_path, collection_path = located

        try:
            item = update_content(file_path, collection_path, frontmatter=frontmatter, body=body)
        except (UnicodeDecodeError, FrontmatterError) as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=READ_FAILED, message=str(exc)),
            )
        except OSError as exc:
            logger.warning("Update failed for %s: %s", file_path, exc)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=WRITE_FAILED, message=str(exc)),
            )

        self._cache.handle_file_change("change", collection, content_id)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": item.id,
                "path": item.path,
                "collection": collection,
                "frontmatter": item.frontmatter,
            },
        )

    @traced
    def delete(self, collection: str, content_id: str) -> ServiceResult:
        op = "delete_content"
        located = self._locate_item(op, collection, content_id)
        if isinstance(located, ServiceResult):
            return located
        file_path, _ = located

        try:
            delete_content(file_path)
        except FileNotFoundError:
            return self._item_not_found(op, collection, content_id)
        except OSError as exc:
            logger.warning("Delete failed for %s: %s", file_path, exc)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=DELETE_FAILED, message=str(exc)),
            )

        self._cache.handle_file_change("unlink", collection, content_id)

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": content_id, "path": str(file_path), "collection": collection},
        )

    @traced
    def list_content(
        self,
        collection: str,
        *,
        include_drafts: bool = True,
        sort_by: str = "pubDate",
        order: Literal["asc", "desc"] = "desc",
    ) -> ServiceResult:
        """Summaries of every item, newest first by default."""
        op = "list_content"
        cacheable = (include_drafts, sort_by, order) == _DEFAULT_QUERY

        summaries = self._cache.get_content(collection) if cacheable else None
        cached = summaries is not None

        if summaries is None:
            located = self._locate(op, collection)
            if isinstance(located, ServiceResult):
                return located
            _, collection_path = located

            generation = self._cache.content_generation(collection)
            with trace_span("read"):
                summaries = get_collection_summaries(
                    collection_path,
                    include_drafts=include_drafts,
                    sort_by=sort_by,
                    order=order,
                )
            if cacheable:
                self._cache.set_content(collection, summaries, generation=generation)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "collection": collection,
                "items": [s.model_dump() for s in summaries],
                "count": len(summaries),
            },
            meta={"cached": cached},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _locate(self, op: str, collection: str) -> tuple[Collection, Path] | ServiceResult:
        """The collection and its absolute directory, or a failed result."""
        try:
            entry = CollectionService(self._workspace).find(collection)
        except OSError as exc:
            logger.warning("Collection discovery failed: %s", exc)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=DISCOVERY_FAILED, message=str(exc)),
            )
        if entry is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=NOT_FOUND,
                    message=f"Collection '{collection}' not found",
                    detail={"collection": collection},
                ),
            )
        return entry, self._workspace.resolve(entry.path)

    def _locate_item(
        self, op: str, collection: str, content_id: str
    ) -> tuple[Path, Path] | ServiceResult:
        located = self._locate(op, collection)
        if isinstance(located, ServiceResult):
            return located
        _, collection_path = located

        file_path = find_content_file(collection_path, content_id)
        if file_path is None:
            return self._item_not_found(op, collection, content_id)
        return file_path, collection_path

    @staticmethod
    def _item_not_found(op: str, collection: str, content_id: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=NOT_FOUND,
                message=f"Content '{content_id}' not found in collection '{collection}'",
                detail={"collection": collection, "id": content_id},
            ),
        )
