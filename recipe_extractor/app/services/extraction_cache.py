"""
Time-bounded memoization of extraction results.

Two tiers: an in-memory dict in front of an optional persistent store (the
recipe_cache table). Reads fall through memory to the store and refill
memory; writes go to both.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_extractor.app.db import models
from recipe_extractor.app.schemas.recipe import DeviceVariant, ExtractionStrategy, Recipe

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 7 * 24 * 60 * 60 * 1000

CacheKey = Tuple[str, DeviceVariant, ExtractionStrategy]


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheEntry(BaseModel):
    key: CacheKey
    recipe: Recipe
    timestamp_ms: int


class DatabaseCacheStore:
    """
    Persistent cache tier backed by the recipe_cache table.

    Storage failures are logged and treated as misses so a broken database
    never fails an extraction.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @staticmethod
    def _row_key(key: CacheKey) -> Tuple[str, str, str]:
        url, variant, strategy = key
        return url, DeviceVariant(variant).value, ExtractionStrategy(strategy).value

    def load(self, key: CacheKey) -> Optional[CacheEntry]:
        try:
            with self._session_factory() as db:
                row = db.get(models.RecipeCacheEntry, self._row_key(key))
                if row is None:
                    return None
                return CacheEntry(
                    key=key, recipe=Recipe.model_validate(row.recipe_json), timestamp_ms=row.timestamp_ms
                )
        except ValidationError as exc:
            logger.warning("Discarding unreadable cache row for %s: %s", key[0], exc)
            self.delete(key)
        except SQLAlchemyError as exc:
            logger.warning("Recipe cache read failed for %s: %s", key[0], exc)
        return None

    def save(self, entry: CacheEntry) -> None:
        url, variant, strategy = self._row_key(entry.key)
        try:
            with self._session_factory() as db:
                row = db.get(models.RecipeCacheEntry, (url, variant, strategy))
                if row is None:
                    row = models.RecipeCacheEntry(url=url, variant=variant, strategy=strategy)
                    db.add(row)
                row.recipe_json = entry.recipe.model_dump(mode="json")
                row.timestamp_ms = entry.timestamp_ms
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Recipe cache write failed for %s: %s", url, exc)

    def delete(self, key: CacheKey) -> None:
        url, variant, strategy = self._row_key(key)
        stmt = delete(models.RecipeCacheEntry).where(
            models.RecipeCacheEntry.url == url,
            models.RecipeCacheEntry.variant == variant,
            models.RecipeCacheEntry.strategy == strategy,
        )
        self._execute(stmt, url)

    def clear(self) -> None:
        self._execute(delete(models.RecipeCacheEntry), "all entries")

    def _execute(self, stmt, label: str) -> None:
        try:
            with self._session_factory() as db:
                db.execute(stmt)
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Recipe cache delete failed for %s: %s", label, exc)


class ExtractionCache:
    """
    Cache keyed by (url, device variant, strategy).

    Entries older than the TTL are dropped lazily when read, from both tiers.
    Owned by one service instance on one event loop, so no locking is needed.
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] = _now_ms,
        store: Optional[DatabaseCacheStore] = None,
    ):
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._store = store
        self._entries: Dict[CacheKey, CacheEntry] = {}

    @staticmethod
    def make_key(url: str, variant: DeviceVariant, strategy: ExtractionStrategy) -> CacheKey:
        return (url, DeviceVariant(variant), ExtractionStrategy(strategy))

    def _expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp_ms >= self.ttl_ms

    def get(self, key: CacheKey) -> Optional[Recipe]:
        entry = self._entries.get(key)
        if entry is None and self._store is not None:
            entry = self._store.load(key)
            if entry is not None:
                logger.debug("Persistent cache hit for %s", key[0])
                self._entries[key] = entry
        if entry is None:
            return None
        if self._expired(entry):
            logger.debug("Cache entry expired for %s", key[0])
            self.invalidate(key)
            return None
        return entry.recipe

    def set(self, key: CacheKey, recipe: Recipe) -> None:
        if recipe.is_degraded:
            logger.debug("Not caching degraded recipe for %s", key[0])
            return
        entry = CacheEntry(key=key, recipe=recipe, timestamp_ms=self._clock())
        self._entries[key] = entry
        if self._store is not None:
            self._store.save(entry)

    def invalidate(self, key: CacheKey) -> None:
        self._entries.pop(key, None)
        if self._store is not None:
            self._store.delete(key)

    def clear(self) -> None:
        self._entries.clear()
        if self._store is not None:
            self._store.clear()

    def __len__(self) -> int:
        """Entries held in memory."""
        return len(self._entries)
