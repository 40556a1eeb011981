from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from git_spotlight.config import Settings
from git_spotlight.models import BlameReport, CacheStats

log = structlog.get_logger()

DEFAULT_CAPACITY = 50


@dataclass(frozen=True)
class CacheEntry:
    report: BlameReport
    revision: str
    cached_at: datetime
    file_path: str


def normalize_file_key(file_path: str) -> str:
    return file_path.replace("\\", "/").lower()


class ResultCache:
    """Parsed blame reports keyed by file, valid for one revision.

    Eviction is first-in-first-out over insertion order; lookups do not
    refresh an entry.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> ResultCache:
        return cls(capacity=settings.cache.capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, file_path: str, current_revision: str) -> BlameReport | None:
        entry = self._entries.get(normalize_file_key(file_path))
        if entry is None or entry.revision != current_revision:
            # stale entries stay until the next set() replaces them
            self._misses += 1
            return None
        self._hits += 1
        return entry.report

    def has(self, file_path: str, current_revision: str) -> bool:
        entry = self._entries.get(normalize_file_key(file_path))
        return entry is not None and entry.revision == current_revision

    def set(self, file_path: str, revision: str, report: BlameReport) -> None:
        key = normalize_file_key(file_path)
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._capacity:
            self._evict_oldest()

        self._entries[key] = CacheEntry(
            report=report,
            revision=revision,
            cached_at=datetime.now(timezone.utc),
            file_path=file_path,
        )

    def delete(self, file_path: str) -> bool:
        return self._entries.pop(normalize_file_key(file_path), None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def invalidate_for_revision_change(self, new_revision: str) -> int:
        stale = [key for key, entry in self._entries.items() if entry.revision != new_revision]
        for key in stale:
            del self._entries[key]
        if stale:
            log.debug("blame_cache_invalidated", revision=new_revision, removed=len(stale))
        return len(stale)

    def stats(self) -> CacheStats:
        total = self._hits + self._misses
        return CacheStats(
            entry_count=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            hit_rate=(self._hits / total) * 100 if total else 0.0,
        )

    def _evict_oldest(self) -> None:
        _, entry = self._entries.popitem(last=False)
        log.debug("blame_cache_evicted", file_path=entry.file_path, cached_at=entry.cached_at.isoformat())
