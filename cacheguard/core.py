#=============================================================================
# File        : cacheguard/core.py
# Project     : CacheGuard v1.0
# Component   : Core Orchestrator - Cache and Memory Monitor Composition
# Description : Owned composition root for one application process
#               • Builds the cache manager, category wrappers and monitor
#               • Starts and stops both background timers together
#               • Status and health summaries for admin endpoints
#               • Kill-switch and debug-mode handling
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading, Cross-Platform
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Explicit instance instead of module globals)
# Dependencies: config, cache, monitor, report, logging_utils
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_core.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import platform
import sys
import threading
import time
from typing import Any, Callable, Dict, Optional

from .cache import CacheManager, CategorizedCache
from .config import CacheGuardConfig
from .logging_utils import get_logger, set_debug
from .monitor import GarbageCollector, MemoryMonitor
from .report import MemoryReport
from .sampling import MemoryProvider

_logger = get_logger(__name__)

_environment_info = {
    'platform': platform.system(),
    'python_implementation': platform.python_implementation(),
    'python_version': platform.python_version(),
    'hostname': platform.node(),
    'process_name': os.path.basename(sys.argv[0]) if sys.argv else 'unknown'
}


class CacheGuard:
    """
    One cache plus one memory monitor, created at the application's
    composition root and passed to whatever needs them.

        guard = CacheGuard(CacheGuardConfig.from_env())
        with guard:
            page = guard.categories.pages.get_or_set(page_id, load_page)
    """

    def __init__(self, config: Optional[CacheGuardConfig] = None,
                 provider: Optional[MemoryProvider] = None,
                 collector: Optional[GarbageCollector] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.config = config or CacheGuardConfig()
        if self.config.debug_mode:
            set_debug(True)

        self._clock = clock
        self._lock = threading.RLock()
        self._start_time = 0.0
        self._running = False

        self.cache = CacheManager(self.config.cache, clock=clock)
        self.categories = CategorizedCache(self.cache)
        self.memory = MemoryMonitor(self.config.memory, provider=provider, collector=collector,
                                    cache=self.cache, clock=clock)

    @classmethod
    def from_env(cls, **kwargs) -> "CacheGuard":
        return cls(CacheGuardConfig.from_env(), **kwargs)

    # --------- Lifecycle ---------

    def start(self) -> bool:
        """Start the cache cleanup and memory sampling timers."""
        with self._lock:
            if not self.config.is_enabled():
                _logger.warning("CacheGuard disabled by kill switch, background timers not started")
                return False
            if self._running:
                _logger.warning("CacheGuard already running")
                return False

            self.cache.start()
            self.memory.start_monitoring()
            self._running = True
            self._start_time = self._clock()

        _logger.info(f"CacheGuard started: {self.config!r}")
        return True

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self.cache.stop()
            self.memory.stop_monitoring()
            self._running = False
        _logger.info("CacheGuard stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self) -> "CacheGuard":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # --------- Reporting ---------

    def generate_report(self) -> MemoryReport:
        return self.memory.generate_report()

    def get_status(self) -> Dict[str, Any]:
        """
        Get comprehensive status information.

        Returns:
            Dictionary with running state, cache summary, memory state and environment
        """
        cache_stats = self.cache.get_stats()
        stats = self.memory.get_detailed_stats()
        return {
            'is_running': self._running,
            'uptime_seconds': self._clock() - self._start_time if self._start_time else 0,
            'cache': {
                'items': cache_stats['items'],
                'max_items': cache_stats['max_items'],
                'hit_rate': cache_stats['hit_rate'],
                'memory_usage_mb': cache_stats['memory_usage_mb'],
                'cleanup_active': self.cache.is_running,
            },
            'memory': {
                'current': stats.current.usage(),
                'status': stats.status.level,
                'trend': stats.trend.to_dict(),
                'samples': len(self.memory.history),
                'monitoring_active': self.memory.is_monitoring,
                'gc_available': self.memory.gc_available,
            },
            'environment_info': _environment_info.copy(),
            'configuration': self.config.to_dict(),
        }

    def health(self) -> Dict[str, Any]:
        """Small health payload: 'ok' unless memory status is critical."""
        status = self.memory.get_status()
        return {
            'status': 'degraded' if status.level == 'critical' else 'ok',
            'memory_status': status.level,
            'heap_used_mb': self.memory.get_usage().heap_used,
            'cache_items': len(self.cache),
            'running': self._running,
        }
