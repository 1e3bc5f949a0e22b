"""ImageService: images colocated with content items (cached per item)."""

from __future__ import annotations

import logging

from writenex.infrastructure.filesystem import find_content_file
from writenex.infrastructure.images import discover_content_images
from writenex.services.base import BaseService
from writenex.services.collections import CollectionService
from writenex.services.result import (
    DISCOVERY_FAILED,
    NOT_FOUND,
    READ_FAILED,
    ServiceError,
    ServiceResult,
)
from writenex.services.telemetry import traced

logger = logging.getLogger(__name__)


class ImageService(BaseService):
    @traced
    def list_images(self, collection: str, content_id: str) -> ServiceResult:
        op = "list_images"

        images = self._cache.get_images(collection, content_id)
        cached = images is not None

        if images is None:
            generation = self._cache.images_generation(collection, content_id)
            try:
                entry = CollectionService(self._workspace).find(collection)
            except OSError as exc:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(code=DISCOVERY_FAILED, message=str(exc)),
                )
            collection_path = self._workspace.resolve(entry.path) if entry else None
            if collection_path is None or find_content_file(collection_path, content_id) is None:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code=NOT_FOUND,
                        message=f"Content '{content_id}' not found in collection '{collection}'",
                        detail={"collection": collection, "id": content_id},
                    ),
                )

            try:
                images = discover_content_images(collection_path, content_id)
            except OSError as exc:
                logger.warning("Image scan failed for %s/%s: %s", collection, content_id, exc)
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(code=READ_FAILED, message=str(exc)),
                )
            self._cache.set_images(collection, content_id, images, generation=generation)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "collection": collection,
                "id": content_id,
                "images": [i.model_dump() for i in images],
                "count": len(images),
            },
            meta={"cached": cached},
        )
