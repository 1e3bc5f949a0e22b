"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``writenex.toml`` only contains
overrides. A project with the usual ``src/content`` layout needs no config
file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from writenex.domain.collections import CollectionConfig, ImageConfig

__all__ = [
    "CacheConfig",
    "CollectionConfig",
    "DiscoveryConfig",
    "ImageConfig",
]


class DiscoveryConfig(BaseModel):
    """[discovery] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    ignore: list[str] = Field(default_factory=list)


class CacheConfig(BaseModel):
    """[cache] section.

    ``ttl_seconds`` overrides the watcher-dependent default TTL.
    """

    model_config = {"frozen": True}

    ttl_seconds: float | None = Field(default=None, gt=0)
