"""In-memory cache for collection, content-summary and image scans.

Three partitions, all owned here:

- the collections list (one global entry),
- content summaries, keyed by collection name,
- discovered images, keyed ``"collection:contentId"``.

An entry is valid while ``clock() - timestamp < ttl``. Expired entries read
as misses but are not deleted eagerly; explicit invalidation removes them.

TTL: 30 seconds when nothing watches the filesystem, 5 minutes once a
watcher is attached (events do the invalidating; the TTL is a safety net).

INVARIANT: One instance per server process, owned by the
:class:`~writenex.infrastructure.workspace.Workspace` and passed to the
services and the watcher. There is no module-level instance.

watchdog calls :meth:`ServerCache.handle_file_change` from its observer
thread, so every map access is guarded by a lock. Critical sections are
dict operations only; nothing blocks while holding it.

A scan runs outside the lock, so an event can land between reading the
disk and storing the result. Every invalidation bumps a generation counter
for the partitions it drops; callers read the generation before scanning
and hand it to the ``set_*`` method, which discards the store if the
generation has moved on since.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from writenex.domain.collections import Collection
from writenex.domain.content import ContentSummary
from writenex.infrastructure.images import DiscoveredImage

T = TypeVar("T")

ChangeType = Literal["add", "change", "unlink"]

#: Opaque token returned by the ``*_generation`` methods.
Generation = tuple[int, ...]

WATCHER_TTL_SECONDS = 5 * 60
DEFAULT_TTL_SECONDS = 30


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class ServerCache:
    """TTL cache with selective, event-driven invalidation."""

    def __init__(
        self,
        *,
        ttl: float | None = None,
        has_watcher: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl is None:
            ttl = WATCHER_TTL_SECONDS if has_watcher else DEFAULT_TTL_SECONDS
        self._ttl = ttl
        self._has_watcher = has_watcher
        self._clock = clock
        self._lock = threading.Lock()
        self._collections: CacheEntry[list[Collection]] | None = None
        self._content: dict[str, CacheEntry[list[ContentSummary]]] = {}
        self._images: dict[str, CacheEntry[list[DiscoveredImage]]] = {}
        # Bumped by bulk invalidation; folded into every generation.
        self._epoch = 0
        self._generations: dict[str, int] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def has_watcher(self) -> bool:
        return self._has_watcher

    def enable_watcher(self) -> None:
        """Switch to the long TTL; invalidation now arrives via events."""
        with self._lock:
            self._has_watcher = True
            self._ttl = WATCHER_TTL_SECONDS

    def _is_valid(self, entry: CacheEntry[Any] | None) -> bool:
        return entry is not None and self._clock() - entry.timestamp < self._ttl

    def _stamp(self, data: T) -> CacheEntry[T]:
        return CacheEntry(data=data, timestamp=self._clock())

    def _bump(self, key: str) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def _generation(self, *keys: str) -> Generation:
        return (self._epoch, *(self._generations.get(k, 0) for k in keys))

    # ── Collections ──────────────────────────────────────────────────

    def collections_generation(self) -> Generation:
        with self._lock:
            return self._generation("collections")

    def get_collections(self) -> list[Collection] | None:
        with self._lock:
            entry = self._collections
            return entry.data if self._is_valid(entry) else None

    def set_collections(
        self, collections: list[Collection], *, generation: Generation | None = None
    ) -> bool:
        """Store *collections* unless invalidated since *generation* was read."""
        with self._lock:
            if generation is not None and generation != self._generation("collections"):
                return False
            self._collections = self._stamp(collections)
            return True

    def invalidate_collections(self) -> None:
        with self._lock:
            self._bump("collections")
            self._collections = None

    # ── Content summaries ────────────────────────────────────────────

    def content_generation(self, collection: str) -> Generation:
        with self._lock:
            return self._generation(f"content:{collection}")

    def get_content(self, collection: str) -> list[ContentSummary] | None:
        with self._lock:
            entry = self._content.get(collection)
            return entry.data if self._is_valid(entry) else None

    def set_content(
        self,
        collection: str,
        items: list[ContentSummary],
        *,
        generation: Generation | None = None,
    ) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation(
                f"content:{collection}"
            ):
                return False
            self._content[collection] = self._stamp(items)
            return True

    def invalidate_content(self, collection: str) -> None:
        with self._lock:
            self._bump(f"content:{collection}")
            self._content.pop(collection, None)

    def invalidate_all_content(self) -> None:
        with self._lock:
            self._epoch += 1
            self._content.clear()

    # ── Images ───────────────────────────────────────────────────────

    @staticmethod
    def images_key(collection: str, content_id: str) -> str:
        return f"{collection}:{content_id}"

    def images_generation(self, collection: str, content_id: str) -> Generation:
        with self._lock:
            return self._generation(
                f"images:{collection}", f"images:{self.images_key(collection, content_id)}"
            )

    def get_images(self, collection: str, content_id: str) -> list[DiscoveredImage] | None:
        with self._lock:
            entry = self._images.get(self.images_key(collection, content_id))
            return entry.data if self._is_valid(entry) else None

    def set_images(
        self,
        collection: str,
        content_id: str,
        images: list[DiscoveredImage],
        *,
        generation: Generation | None = None,
    ) -> bool:
        key = self.images_key(collection, content_id)
        with self._lock:
            if generation is not None and generation != self._generation(
                f"images:{collection}", f"images:{key}"
            ):
                return False
            self._images[key] = self._stamp(images)
            return True

    def invalidate_images(self, collection: str, content_id: str) -> None:
        key = self.images_key(collection, content_id)
        with self._lock:
            self._bump(f"images:{key}")
            self._images.pop(key, None)

    def invalidate_collection_images(self, collection: str) -> None:
        prefix = f"{collection}:"
        with self._lock:
            self._bump(f"images:{collection}")
            for key in [k for k in self._images if k.startswith(prefix)]:
                del self._images[key]

    def invalidate_all_images(self) -> None:
        with self._lock:
            self._epoch += 1
            self._images.clear()

    # ── Bulk ─────────────────────────────────────────────────────────

    def invalidate_all(self) -> None:
        with self._lock:
            self._epoch += 1
            self._collections = None
            self._content.clear()
            self._images.clear()

    def handle_file_change(
        self,
        change_type: ChangeType,
        collection: str,
        content_id: str | None = None,
    ) -> None:
        """Drop exactly the partitions a file change can have made stale.

        - The collection's content summaries: always.
        - Images: the one item when *content_id* is known, else every item
          in the collection.
        - The collections list: on ``add``/``unlink`` only (counts changed).
        """
        self.invalidate_content(collection)
        if content_id:
            self.invalidate_images(collection, content_id)
        else:
            self.invalidate_collection_images(collection)
        if change_type in ("add", "unlink"):
            self.invalidate_collections()

    # ── Stats ────────────────────────────────────────────────────────

    def get_stats(self) -> dict[str, Any]:
        """Which partitions currently hold valid data."""
        with self._lock:
            return {
                "collections_valid": self._is_valid(self._collections),
                "content_collections": sorted(
                    k for k, v in self._content.items() if self._is_valid(v)
                ),
                "cached_images": sorted(k for k, v in self._images.items() if self._is_valid(v)),
                "ttl": self._ttl,
                "has_watcher": self._has_watcher,
            }
