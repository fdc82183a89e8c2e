#=============================================================================
# File        : cacheguard/cache/manager.py
# Project     : CacheGuard v1.0
# Component   : Cache Manager - Bounded TTL Cache with LRU Eviction
# Description : Adaptive in-process cache for page and API-key lookups
#               • Per-entry TTL (not sliding) with periodic expiry sweep
#               • Capacity-bound LRU eviction on insert
#               • Memory-pressure forced cleanup keeping the hottest half
#               • Hit-rate analysis, statistics and detailed reports
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, scheduling, store, logging_utils
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_cache_manager.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import math
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..config import CacheConfig
from ..logging_utils import get_logger
from ..scheduling import RepeatingTask
from .store import CacheItem, CacheStore

_logger = get_logger(__name__)

HOT_COLD_LIMIT = 10


def _category_of(key: str) -> str:
    prefix, sep, _ = key.partition(':')
    return prefix if sep and prefix else 'other'


class CacheManager:
    """
    Bounded key/value cache with TTL expiry and LRU eviction.

    Every public method runs under one re-entrant lock, so each call is
    atomic with respect to the background cleanup timer.
    """

    def __init__(self, config: Optional[CacheConfig] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.config = config or CacheConfig()
        self._clock = clock
        self._store = CacheStore()
        self._lock = threading.RLock()
        self._stats = {
            'hits': 0,
            'misses': 0,
            'sets': 0,
            'deletes': 0,
            'evictions': 0,
            'expirations': 0,
            'forced_removals': 0,
        }
        self._total_memory_bytes = 0
        self._start_time = clock()
        self._cleanup_task: Optional[RepeatingTask] = None

    # --------- Properties ---------

    @property
    def max_items(self) -> int:
        return self.config.max_items

    @property
    def total_memory_bytes(self) -> int:
        return self._total_memory_bytes

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store)

    # --------- Core operations ---------

    def set(self, key: str, value: Any, ttl_s: Optional[float] = None, category: str = 'default') -> bool:
        """Insert or overwrite ``key``. Returns True on success."""
        ttl = self.config.default_ttl_s if ttl_s is None else ttl_s
        with self._lock:
            if key not in self._store and len(self._store) >= self.config.max_items:
                self.evict_lru()

            item = CacheItem(key=key, value=value, ttl_s=ttl, created_at=self._clock())
            self._store.put(item)
            self._stats['sets'] += 1
            self._update_memory_usage()

        _logger.debug(f"Cache set: {key} ({category}, ttl={ttl}s, size={item.size_bytes} bytes)")
        return True

    def get(self, key: str) -> Any:
        """Return the cached value, or None on a miss or an expired entry."""
        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._stats['misses'] += 1
                return None

            now = self._clock()
            if item.is_expired(now):
                self.delete(key)
                self._stats['misses'] += 1
                return None

            self._stats['hits'] += 1
            return item.touch(now)

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._store.remove(key) is None:
                return False
            self._stats['deletes'] += 1
            self._update_memory_usage()
            return True

    def has(self, key: str) -> bool:
        """Existence check that ignores expired items and changes no counters."""
        with self._lock:
            item = self._store.get(key)
            return item is not None and not item.is_expired(self._clock())

    def clear(self) -> int:
        with self._lock:
            count = self._store.clear()
            self._total_memory_bytes = 0
        _logger.info(f"Cache cleared: {count} items")
        return count

    # --------- Cache-aside helpers ---------

    def get_or_set(self, key: str, loader: Callable[[], Any], ttl_s: Optional[float] = None,
                   category: str = 'default') -> Any:
        """
        Return the cached value or load, store and return it.

        A loader returning None is not cached, so the next call loads again.
        """
        value = self.get(key)
        if value is not None:
            return value

        value = loader()
        if value is not None:
            self.set(key, value, ttl_s, category)
        return value

    def warmup(self, entries: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
               category: str = 'default', ttl_s: Optional[float] = None) -> int:
        """Preload entries with the category's TTL. Returns the number stored."""
        ttl = self.config.ttl_for(category) if ttl_s is None else ttl_s
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        stored = 0
        for key, value in pairs:
            if self.set(key, value, ttl, category):
                stored += 1
        _logger.info(f"Cache warmup: {stored} items ({category})")
        return stored

    # --------- Maintenance ---------

    def cleanup(self) -> int:
        """Remove expired items, then check memory pressure. Returns items removed."""
        with self._lock:
            before = len(self._store)
            now = self._clock()
            expired = [key for key, item in self._store.items() if item.is_expired(now)]
            for key in expired:
                self._store.remove(key)

            if expired:
                self._stats['expirations'] += len(expired)
                self._update_memory_usage()
                _logger.info(f"Expired cache cleanup: {len(expired)} items ({before} -> {len(self._store)})")

            self.check_memory_optimization()
            return len(expired)

    def check_memory_optimization(self) -> List[str]:
        """Apply memory-pressure and hit-rate rules. Returns the rules that fired."""
        triggered = []
        with self._lock:
            memory_mb = self.get_memory_usage_mb()
            if memory_mb > self.config.memory_threshold_mb:
                _logger.warning(f"Cache memory usage high: {memory_mb}MB, forcing cleanup")
                self.force_cleanup()
                triggered.append('force_cleanup')

            hit_rate = self.get_hit_rate()
            if (hit_rate < self.config.low_hit_rate_threshold
                    and len(self._store) > self.config.low_hit_rate_min_items):
                _logger.warning(f"Cache hit rate low: {round(hit_rate * 100)}%, "
                                f"consider reviewing the caching strategy")
                triggered.append('low_hit_rate')
        return triggered

    def force_cleanup(self) -> int:
        """Keep the most recently accessed half (rounded up), drop the rest."""
        with self._lock:
            # Stable sort: equal last_accessed keeps insertion order
            ranked = sorted(self._store.values(), key=lambda item: item.last_accessed, reverse=True)
            keep_count = math.ceil(len(ranked) / 2)
            to_delete = ranked[keep_count:]

            for item in to_delete:
                self._store.remove(item.key)

            self._stats['forced_removals'] += len(to_delete)
            self._update_memory_usage()

        _logger.info(f"Forced cleanup: removed {len(to_delete)} items, kept {keep_count}")
        return len(to_delete)

    def evict_lru(self) -> Optional[str]:
        """Remove the least recently accessed item. Returns its key."""
        with self._lock:
            oldest: Optional[CacheItem] = None
            for item in self._store.values():
                if oldest is None or item.last_accessed < oldest.last_accessed:
                    oldest = item

            if oldest is None:
                return None

            self._store.remove(oldest.key)
            self._stats['evictions'] += 1
            self._update_memory_usage()

        _logger.debug(f"LRU eviction: {oldest.key} (last accessed {oldest.last_accessed:.3f})")
        return oldest.key

    def _update_memory_usage(self) -> None:
        self._total_memory_bytes = self._store.total_size()

    # --------- Background cleanup ---------

    def start(self) -> bool:
        """Start the periodic expiry sweep. Returns False if already running."""
        with self._lock:
            if self._cleanup_task is None:
                self._cleanup_task = RepeatingTask(
                    self.config.cleanup_interval_s, self.cleanup, name="CacheGuard-CacheCleanup"
                )
            started = self._cleanup_task.start()
        if started:
            _logger.info(f"Cache manager started (cleanup every {self.config.cleanup_interval_s}s)")
        return started

    def stop(self) -> None:
        with self._lock:
            task = self._cleanup_task
            self._cleanup_task = None
        if task is not None:
            task.cancel()
            _logger.info("Cache manager stopped")

    @property
    def is_running(self) -> bool:
        task = self._cleanup_task
        return task is not None and task.is_running

    # --------- Reporting ---------

    def get_memory_usage_mb(self) -> float:
        return round(self._total_memory_bytes / 1024 / 1024, 2)

    def get_hit_rate(self) -> float:
        total = self._stats['hits'] + self._stats['misses']
        return self._stats['hits'] / total if total > 0 else 0.0

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'items': len(self._store),
                'max_items': self.config.max_items,
                'hit_rate': round(self.get_hit_rate() * 100, 2),
                'memory_usage_mb': self.get_memory_usage_mb(),
                'total_memory_bytes': self._total_memory_bytes,
                'uptime_s': self._clock() - self._start_time,
                'operations': dict(self._stats),
                'config': {
                    'default_ttl_s': self.config.default_ttl_s,
                    'max_items': self.config.max_items,
                    'cleanup_interval_s': self.config.cleanup_interval_s,
                    'low_hit_rate_threshold': self.config.low_hit_rate_threshold,
                    'memory_threshold_mb': self.config.memory_threshold_mb,
                    'ttl_presets': dict(self.config.ttl_presets),
                },
            }

    def get_detailed_report(self) -> Dict[str, Any]:
        """Statistics plus per-category breakdown and hottest/coldest items."""
        with self._lock:
            stats = self.get_stats()
            now = self._clock()
            categories: Dict[str, Dict[str, Any]] = {}
            details = []

            for key, item in self._store.items():
                metadata = item.metadata(now)
                details.append(metadata)

                bucket = categories.setdefault(_category_of(key), {
                    'count': 0,
                    'total_size': 0,
                    'avg_access_count': 0.0,
                    'items': [],
                })
                bucket['count'] += 1
                bucket['total_size'] += metadata['size']
                bucket['items'].append(metadata)

        for bucket in categories.values():
            bucket['avg_access_count'] = sum(m['access_count'] for m in bucket['items']) / len(bucket['items'])

        hot_items = sorted(details, key=lambda m: m['access_count'], reverse=True)[:HOT_COLD_LIMIT]
        cold_items = sorted(details, key=lambda m: m['access_count'])[:HOT_COLD_LIMIT]
        average_size = round(sum(m['size'] for m in details) / len(details)) if details else 0

        return {
            'summary': stats,
            'categories': categories,
            'analysis': {
                'hot_items': hot_items,
                'cold_items': cold_items,
                'total_categories': len(categories),
                'average_item_size': average_size,
            },
            'generated_at': datetime.now(timezone.utc).isoformat(),
        }
