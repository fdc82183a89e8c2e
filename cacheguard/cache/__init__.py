#=============================================================================
# File        : cacheguard/cache/__init__.py
# Project     : CacheGuard v1.0
# Component   : Cache Package - In-Process Cache Exports
# Description : Package initialization for the adaptive cache
#               • CacheItem and CacheStore data holders
#               • CacheManager policy and statistics
#               • Category-scoped key-prefix wrappers
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: store, manager, categories
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_cache_manager.py, tests/test_categories.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from .store import CacheItem, CacheStore, estimate_size
from .manager import CacheManager
from .categories import CategoryCache, CategorizedCache

__all__ = [
    "CacheItem",
    "CacheStore",
    "estimate_size",
    "CacheManager",
    "CategoryCache",
    "CategorizedCache",
]
