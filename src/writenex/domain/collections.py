"""Collection models and the discovered/configured merge.

Collections come from two places: directories found under the content
root (with an inferred naming pattern) and explicit ``[[collections]]``
entries in ``writenex.toml``. :func:`merge_collections` folds them into
one authoritative list.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, Field

from writenex.domain.patterns import DEFAULT_PATTERN

FieldType = Literal["string", "number", "boolean", "date", "array", "image", "object"]

ImageStrategy = Literal["colocated", "public", "custom"]


class SchemaField(BaseModel):
    """One frontmatter field in a collection schema."""

    model_config = {"frozen": True}

    type: FieldType
    required: bool = False
    default: Any = None
    items: str | None = None
    description: str | None = None


class ImageConfig(BaseModel):
    """Where uploaded images for a collection live."""

    model_config = {"frozen": True}

    strategy: ImageStrategy = "colocated"
    public_path: str = "/images"
    storage_path: str = "public/images"


class CollectionConfig(BaseModel):
    """A ``[[collections]]`` entry from configuration."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str = Field(min_length=1)
    path: str = Field(min_length=1)
    file_pattern: str | None = None
    preview_url: str | None = None
    schema_: dict[str, SchemaField] | None = Field(default=None, alias="schema")
    images: ImageConfig | None = None


class Collection(BaseModel):
    """A collection as served to clients."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str
    path: str
    file_pattern: str = DEFAULT_PATTERN
    count: int = 0
    schema_: dict[str, SchemaField] | None = Field(default=None, alias="schema")
    preview_url: str | None = None
    images: ImageConfig | None = None


def _apply_config(collection: Collection, config: CollectionConfig) -> Collection:
    """Override *collection* with every field *config* actually sets."""
    update: dict[str, Any] = {}
    if config.file_pattern:
        update["file_pattern"] = config.file_pattern
    if config.schema_ is not None:
        update["schema_"] = config.schema_
    if config.preview_url:
        update["preview_url"] = config.preview_url
    if config.images is not None:
        update["images"] = config.images
    return collection.model_copy(update=update) if update else collection


def merge_collections(
    discovered: Iterable[Collection],
    configured: Iterable[CollectionConfig],
) -> list[Collection]:
    """Merge discovered collections with configured ones.

    Discovery order is kept; configured collections without an on-disk
    counterpart are appended in configuration order with ``count == 0``.
    """
    by_name = {cfg.name: cfg for cfg in configured}
    merged: list[Collection] = []
    seen: set[str] = set()

    for collection in discovered:
        cfg = by_name.get(collection.name)
        merged.append(_apply_config(collection, cfg) if cfg else collection)
        seen.add(collection.name)

    for name, cfg in by_name.items():
        if name in seen:
            continue
        merged.append(
            Collection(
                name=cfg.name,
                path=cfg.path,
                file_pattern=cfg.file_pattern or DEFAULT_PATTERN,
                count=0,
                schema_=cfg.schema_,
                preview_url=cfg.preview_url,
                images=cfg.images,
            )
        )

    return merged
