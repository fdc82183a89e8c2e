#=============================================================================
# File        : cacheguard/cache/store.py
# Project     : CacheGuard v1.0
# Component   : Cache Store - Entries and Metadata
# Description : Plain data holders for the in-process cache
#               • CacheItem with TTL, recency and access metadata
#               • Size estimate from the JSON serialization length
#               • Insertion-ordered keyed store
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, JSON
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: json, dataclasses, typing
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_cache_manager.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


def estimate_size(value: Any) -> int:
    """
    Estimate the size of a value as the length of its JSON serialization.

    Returns 0 when the value cannot be serialized.
    """
    try:
        return len(json.dumps(value, ensure_ascii=False))
    except (TypeError, ValueError, OverflowError, RecursionError):
        return 0


@dataclass
class CacheItem:
    """A cached value with its TTL and access metadata."""
    key: str
    value: Any
    ttl_s: float
    created_at: float
    last_accessed: float = field(default=0.0)
    access_count: int = 0
    size_bytes: int = field(default=-1)

    def __post_init__(self):
        if not self.last_accessed:
            self.last_accessed = self.created_at
        if self.size_bytes < 0:
            self.size_bytes = estimate_size(self.value)

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_s

    def touch(self, now: float) -> Any:
        """Record a successful read and return the value."""
        self.last_accessed = now
        self.access_count += 1
        return self.value

    def metadata(self, now: float) -> Dict[str, Any]:
        return {
            'key': self.key,
            'created_at': self.created_at,
            'last_accessed': self.last_accessed,
            'access_count': self.access_count,
            'size': self.size_bytes,
            'ttl': self.ttl_s,
            'age': now - self.created_at,
            'is_expired': self.is_expired(now),
        }


class CacheStore:
    """
    Insertion-ordered map of cache items.

    Holds data only; policy (TTL, eviction, statistics) lives in CacheManager.
    """

    def __init__(self) -> None:
        self._items: Dict[str, CacheItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def get(self, key: str) -> Optional[CacheItem]:
        return self._items.get(key)

    def put(self, item: CacheItem) -> None:
        # Re-setting a key starts a new entry at the end of insertion order
        self._items.pop(item.key, None)
        self._items[item.key] = item

    def remove(self, key: str) -> Optional[CacheItem]:
        return self._items.pop(key, None)

    def items(self) -> List[Tuple[str, CacheItem]]:
        return list(self._items.items())

    def values(self) -> List[CacheItem]:
        return list(self._items.values())

    def clear(self) -> int:
        count = len(self._items)
        self._items.clear()
        return count

    def total_size(self) -> int:
        return sum(item.size_bytes for item in self._items.values())
