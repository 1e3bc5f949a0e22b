"""Tests for config models: defaults and validation."""

import pytest
from pydantic import ValidationError

from writenex.config.models import CacheConfig, CollectionConfig, DiscoveryConfig


class TestSectionDefaults:
    def test_discovery(self) -> None:
        cfg = DiscoveryConfig()
        assert cfg.enabled is True
        assert cfg.ignore == []

    def test_cache_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            CacheConfig(ttl_seconds=0)


class TestCollectionConfig:
    def test_requires_name_and_path(self) -> None:
        with pytest.raises(ValidationError):
            CollectionConfig(name="", path="src/content/blog")

    def test_schema_alias(self) -> None:
        cfg = CollectionConfig.model_validate(
            {"name": "blog", "path": "p", "schema": {"tags": {"type": "array", "items": "string"}}}
        )
        assert cfg.schema_ is not None
        assert cfg.schema_["tags"].items == "string"

    def test_unknown_field_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CollectionConfig.model_validate(
                {"name": "blog", "path": "p", "schema": {"x": {"type": "uuid"}}}
            )
