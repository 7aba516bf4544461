"""
Export Cache - memoizes (locale, namespace, tag-set) export slices.

Entries expire after a fixed TTL or when a write touches their
(locale, namespace); every tag-set variant of a slice goes at once.
A failing cache backend never fails an export: the slice is read from
the store instead.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from translation_service.constants import EXPORT_CACHE_PREFIX, EXPORT_CACHE_TTL
from translation_service.exceptions import CacheException
from translation_service.metrics import export_cache_invalidations_total, export_cache_lookups_total

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    translations: Dict[str, str]
    cache_hit: bool

    @property
    def count(self):
        return len(self.translations)


class ExportCache:
    def __init__(self, query_engine, backend, ttl: int = EXPORT_CACHE_TTL, prefix: str = EXPORT_CACHE_PREFIX):
        self.query_engine = query_engine
        self.backend = backend
        self.ttl = ttl
        self.prefix = prefix

    def slice_prefix(self, locale: str, namespace: str) -> str:
        """
        Prefix shared by every tag-set variant of (locale, namespace).

        The pair is hashed as a JSON array so a ":" inside either value
        cannot make two slices collide.
        """
        slice_digest = hashlib.md5(json.dumps([locale, namespace]).encode("utf-8")).hexdigest()
        return f"{self.prefix}:{slice_digest}:"

    def make_key(self, locale: str, namespace: str, tags: Optional[Iterable[str]] = None) -> str:
        """
        Cache key for a slice. Tags are a set: order and repeats don't matter.
        """
        tag_set = sorted(set(tags or ()))
        digest = hashlib.md5(json.dumps(tag_set).encode("utf-8")).hexdigest()
        return f"{self.slice_prefix(locale, namespace)}{digest}"

    def export(self, locale: str, namespace: str, tags: Optional[Iterable[str]] = None) -> ExportResult:
        tags = sorted(set(tags or ()))
        cache_key = self.make_key(locale, namespace, tags)

        cached_value = None
        try:
            cached_value = self.backend.get(cache_key)
        except CacheException as e:
            export_cache_lookups_total.labels(result="error").inc()
            logger.warning(f"Export cache read failed, serving uncached: {e.message}")
            return ExportResult(self.query_engine.export_slice(locale, namespace, tags), cache_hit=False)

        if cached_value is not None:
            try:
                translations = json.loads(cached_value)
                export_cache_lookups_total.labels(result="hit").inc()
                return ExportResult(translations, cache_hit=True)
            except json.JSONDecodeError:
                logger.warning(f"Discarding unreadable export cache entry {cache_key}")

        export_cache_lookups_total.labels(result="miss").inc()
        translations = self.query_engine.export_slice(locale, namespace, tags)

        try:
            self.backend.set(cache_key, json.dumps(translations, ensure_ascii=False), self.ttl)
        except CacheException as e:
            logger.warning(f"Export cache write failed: {e.message}")

        return ExportResult(translations, cache_hit=False)

    def invalidate(self, locale: str, namespace: str) -> int:
        """Drop every cached tag-set variant of (locale, namespace)"""
        prefix = self.slice_prefix(locale, namespace)
        try:
            removed = self.backend.delete_prefix(prefix)
        except CacheException as e:
            logger.error(f"Export cache invalidation failed for {prefix}*: {e.message}")
            return 0

        export_cache_invalidations_total.inc()
        if removed:
            logger.debug(f"Invalidated {removed} export cache entries for {locale}/{namespace}")
        return removed

    def invalidate_slices(self, slices: Iterable[Tuple[str, str]]) -> int:
        total = 0
        for locale, namespace in dict.fromkeys(slices):
            total += self.invalidate(locale, namespace)
        return total

    def clear(self) -> int:
        """Drop every export entry"""
        try:
            removed = self.backend.delete_prefix(f"{self.prefix}:")
        except CacheException as e:
            logger.error(f"Error clearing export cache: {e.message}")
            return 0
        logger.info(f"Cleared export cache ({removed} keys)")
        return removed

    def info(self) -> Dict:
        return {"ttl": self.ttl, "prefix": self.prefix, **self.backend.info()}
