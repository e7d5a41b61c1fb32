"""TTL cache for generated LLM narratives.

Two interchangeable backends:
- SQLiteLLMCache: persisted in the ``llm_cache`` table
- MemoryLLMCache: per-process dict, for tests and one-off CLI runs

The cache is always passed in explicitly; there is no module-level instance.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path

from ..common.config import CacheSettings
from ..database.connection import get_connection

logger = logging.getLogger(__name__)


class CacheType(str, Enum):
    ANALYSIS = "analysis"
    COMPARISON = "comparison"
    RECOMMEND = "recommend"


def cache_ttl(cache_type: CacheType, cache_settings: CacheSettings | None = None) -> timedelta:
    """TTL for a successful narrative of the given type."""
    cache_settings = cache_settings or CacheSettings()
    hours = {
        CacheType.ANALYSIS: cache_settings.analysis_ttl_hours,
        CacheType.COMPARISON: cache_settings.comparison_ttl_hours,
        CacheType.RECOMMEND: cache_settings.recommend_ttl_hours,
    }[cache_type]
    return timedelta(hours=hours)


@dataclass
class CacheEntry:
    cache_key: str
    provider: str
    response: str
    expires_at: datetime
    product_id: int | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class LLMCache(ABC):
    """Key -> (provider, response) store with absolute expiry times."""

    @abstractmethod
    def get(self, cache_key: str, now: datetime) -> CacheEntry | None:
        """Return the entry if present and not expired at ``now``."""

    @abstractmethod
    def set(self, entry: CacheEntry) -> None:
        """Insert or replace the entry for ``entry.cache_key``."""

    @abstractmethod
    def delete(self, cache_key: str) -> None:
        ...

    @abstractmethod
    def delete_expired(self, now: datetime) -> int:
        """Remove expired entries. Returns the number removed."""


class MemoryLLMCache(LLMCache):

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, cache_key: str, now: datetime) -> CacheEntry | None:
        entry = self._entries.get(cache_key)
        if entry is None or entry.is_expired(now):
            return None
        return entry

    def set(self, entry: CacheEntry) -> None:
        self._entries[entry.cache_key] = entry

    def delete(self, cache_key: str) -> None:
        self._entries.pop(cache_key, None)

    def delete_expired(self, now: datetime) -> int:
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)


class SQLiteLLMCache(LLMCache):
    """Cache rows in the ``llm_cache`` table (see database.connection)."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path

    def get(self, cache_key: str, now: datetime) -> CacheEntry | None:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT * FROM llm_cache WHERE cache_key = ? AND expires_at > ?",
                (cache_key, now.isoformat()),
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return CacheEntry(
            cache_key=row["cache_key"],
            provider=row["provider"],
            response=row["response"],
            expires_at=datetime.fromisoformat(row["expires_at"]),
            product_id=row["product_id"],
        )

    def set(self, entry: CacheEntry) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """
                INSERT INTO llm_cache (cache_key, provider, response, expires_at, product_id)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(cache_key) DO UPDATE SET
                    provider = excluded.provider,
                    response = excluded.response,
                    expires_at = excluded.expires_at,
                    product_id = COALESCE(excluded.product_id, llm_cache.product_id)
                """,
                (
                    entry.cache_key,
                    entry.provider,
                    entry.response,
                    entry.expires_at.isoformat(),
                    entry.product_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, cache_key: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM llm_cache WHERE cache_key = ?", (cache_key,))
            conn.commit()
        finally:
            conn.close()

    def delete_expired(self, now: datetime) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "DELETE FROM llm_cache WHERE expires_at <= ?", (now.isoformat(),)
            )
            conn.commit()
            removed = cursor.rowcount
        finally:
            conn.close()
        logger.info("Removed %d expired LLM cache entries", removed)
        return removed
