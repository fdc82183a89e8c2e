#=============================================================================
# File        : cacheguard/cache/categories.py
# Project     : CacheGuard v1.0
# Component   : Category Wrappers - Key-Prefix Namespaces
# Description : Convenience views over one CacheManager
#               • pages, api_keys, stats, performance, memory, quick
#               • Preset TTL chosen per category
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, manager
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_categories.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from typing import Any, Callable, Dict

from ..config import CATEGORY_PREFIXES
from .manager import CacheManager


class CategoryCache:
    """Key-prefixed view of a CacheManager using one category's TTL."""

    def __init__(self, manager: CacheManager, category: str, prefix: str) -> None:
        self._manager = manager
        self.category = category
        self.prefix = prefix

    @property
    def ttl_s(self) -> float:
        return self._manager.config.ttl_for(self.category)

    def key_for(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def set(self, key: str, value: Any) -> bool:
        return self._manager.set(self.key_for(key), value, self.ttl_s, self.category)

    def get(self, key: str) -> Any:
        return self._manager.get(self.key_for(key))

    def delete(self, key: str) -> bool:
        return self._manager.delete(self.key_for(key))

    def has(self, key: str) -> bool:
        return self._manager.has(self.key_for(key))

    def get_or_set(self, key: str, loader: Callable[[], Any]) -> Any:
        return self._manager.get_or_set(self.key_for(key), loader, self.ttl_s, self.category)

    def __repr__(self) -> str:
        return f"CategoryCache(category='{self.category}', prefix='{self.prefix}', ttl_s={self.ttl_s})"


class CategorizedCache:
    """
    The category-scoped cache API handed to data-access code.

    All categories share the manager's items, counters and capacity.
    """

    def __init__(self, manager: CacheManager) -> None:
        self.manager = manager
        self._categories: Dict[str, CategoryCache] = {
            name: CategoryCache(manager, name, prefix)
            for name, prefix in CATEGORY_PREFIXES.items()
        }
        self.pages = self._categories['pages']
        self.api_keys = self._categories['api_keys']
        self.stats = self._categories['stats']
        self.performance = self._categories['performance']
        self.memory = self._categories['memory']
        self.quick = self._categories['quick']

    def category(self, name: str) -> CategoryCache:
        try:
            return self._categories[name]
        except KeyError:
            raise ValueError(f"Unknown cache category '{name}'") from None

    def set(self, key: str, value: Any, category: str = 'default') -> bool:
        """Set with the category's preset TTL, the default TTL for unknown categories."""
        return self.manager.set(key, value, self.manager.config.ttl_for(category), category)

    def get(self, key: str) -> Any:
        return self.manager.get(key)

    def delete(self, key: str) -> bool:
        return self.manager.delete(key)

    def has(self, key: str) -> bool:
        return self.manager.has(key)

    def clear(self) -> int:
        return self.manager.clear()

    def report(self) -> Dict[str, Any]:
        return self.manager.get_detailed_report()
