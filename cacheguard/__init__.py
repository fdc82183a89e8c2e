#=============================================================================
# File        : cacheguard/__init__.py
# Project     : CacheGuard v1.0
# Component   : Package Initialization - Public API
# Description : Adaptive in-process cache and memory monitor
#               • Bounded TTL cache with LRU eviction and category presets
#               • Memory sampler with trend analysis and leak heuristics
#               • Manual garbage collection and structured reports
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading, psutil
# Standards   : PEP 8, Type Hints, Dataclasses
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Cache and memory monitor release)
# Dependencies: typing, threading, psutil
# SHA-256     : [Updated by CI/CD]
# Testing     : tests/
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. Released under MIT License.
#=============================================================================

"""
CacheGuard - Adaptive Cache and Memory Monitor

An in-process cache for hot lookups (rendered pages, API-key validation)
that keeps itself bounded, paired with a memory monitor that samples the
process, classifies pressure and reacts to it.

Quick Start:
    from cacheguard import CacheGuard, CacheGuardConfig

    guard = CacheGuard(CacheGuardConfig.from_env())
    guard.start()

    page = guard.categories.pages.get_or_set(page_id, lambda: load_page(page_id))

    print(guard.generate_report().summary())
    guard.stop()
"""

from .config import (
    CacheConfig,
    MemoryConfig,
    CacheGuardConfig,
    TTL_PRESETS,
)

from .cache import (
    CacheManager,
    CategoryCache,
    CategorizedCache,
)

from .monitor import (
    MemoryMonitor,
    MemoryStats,
    MemoryStatus,
    Trend,
    LeakSignal,
    GCResult,
)

from .report import (
    MemoryReport,
    Recommendation,
    ReportGenerator,
)

from .sampling import MemorySample
from .core import CacheGuard

__version__ = "1.0.0"
__author__ = "Kyle Clouthier"
__license__ = "MIT"
__description__ = "Adaptive in-process cache and memory monitor"

__all__ = [
    # Composition root
    "CacheGuard",

    # Configuration
    "CacheConfig",
    "MemoryConfig",
    "CacheGuardConfig",
    "TTL_PRESETS",

    # Cache
    "CacheManager",
    "CategoryCache",
    "CategorizedCache",

    # Memory monitor
    "MemoryMonitor",
    "MemoryStats",
    "MemoryStatus",
    "MemorySample",
    "Trend",
    "LeakSignal",
    "GCResult",

    # Reporting
    "MemoryReport",
    "Recommendation",
    "ReportGenerator",

    # Metadata
    "__version__",
    "__author__",
    "__license__",
]


def get_info() -> str:
    """Get information about CacheGuard."""
    return f"""
CacheGuard v{__version__} - {__description__}

Built by: {__author__}
License: {__license__}

Cache:
• TTL presets per category (pages, api_keys, stats, performance, memory, quick)
• LRU eviction at capacity, forced cleanup under memory pressure
• Hit-rate tracking and detailed per-category reports

Memory monitor:
• Periodic sampling with a bounded history and one-time baseline
• Normal/warning/critical status, trend and leak heuristics
• Manual garbage collection with before/after measurement
"""
