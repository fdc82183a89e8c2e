#=============================================================================
# File        : cacheguard/monitor/monitor.py
# Project     : CacheGuard v1.0
# Component   : Memory Monitor - Memory Subsystem Facade
# Description : Wires sampler, analyzers, GC controller and reporting
#               • start/stop monitoring, current usage, detailed stats
#               • Trend, leak detection and manual GC entry points
#               • Structured reports with recommendations
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, psutil, Threading
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, sampling, history, sampler, trend, leaks, gc_controller, report
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_memory_sampler.py, tests/test_report.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import platform
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from ..config import MemoryConfig
from ..sampling import MemoryProvider, MemorySample, MemoryTracker, process_uptime_s
from .gc_controller import GarbageCollector, GCController, GCResult, NullGarbageCollector, PythonGarbageCollector
from .history import MemoryHistory
from .leaks import LeakDetector, LeakSignal
from .sampler import ManagementResult, MemorySampler, MemoryStatus, classify_status
from .trend import Trend, TrendAnalyzer
from ..report import MemoryReport, ReportGenerator

if TYPE_CHECKING:
    from ..cache.manager import CacheManager


@dataclass(frozen=True)
class MemoryStats:
    """Point-in-time view of the memory subsystem."""
    current: MemorySample
    baseline: Optional[MemorySample]
    trend: Trend
    status: MemoryStatus
    uptime_s: float
    pid: int
    platform: str
    python_version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current': self.current.usage(),
            'baseline': self.baseline.to_dict() if self.baseline else None,
            'trend': self.trend.to_dict(),
            'status': self.status.to_dict(),
            'uptime': round(self.uptime_s),
            'pid': self.pid,
            'platform': self.platform,
            'python_version': self.python_version,
            'timestamps': {
                'current': self.current.timestamp,
                'baseline': self.baseline.timestamp if self.baseline else None,
            },
        }


class MemoryMonitor:
    """
    The memory subsystem as one object.

    Pass ``provider``/``collector`` to replace the psutil reader or the
    CPython collector (tests use scripted fakes).
    """

    def __init__(self, config: Optional[MemoryConfig] = None,
                 provider: Optional[MemoryProvider] = None,
                 collector: Optional[GarbageCollector] = None,
                 cache: Optional["CacheManager"] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.config = config or MemoryConfig()
        if collector is None:
            collector = PythonGarbageCollector() if self.config.expose_gc else NullGarbageCollector()

        self.cache = cache
        self.tracker = MemoryTracker(provider, clock=clock)
        self.history = MemoryHistory(self.config.snapshot_retention)
        self.trend_analyzer = TrendAnalyzer(self.history, self.config)
        self.leak_detector = LeakDetector(self.history, self.config)
        self.gc_controller = GCController(self.tracker, collector)
        self.sampler = MemorySampler(self.tracker, self.history, self.trend_analyzer,
                                     self.gc_controller, self.config, clock=clock)

    # --------- Lifecycle ---------

    def start_monitoring(self) -> bool:
        return self.sampler.start_monitoring()

    def stop_monitoring(self) -> None:
        self.sampler.stop_monitoring()

    @property
    def is_monitoring(self) -> bool:
        return self.sampler.is_monitoring

    @property
    def baseline(self) -> Optional[MemorySample]:
        return self.sampler.baseline

    # --------- Readings and analysis ---------

    def get_usage(self) -> MemorySample:
        return self.tracker.sample()

    def sample(self) -> ManagementResult:
        """Run one monitor tick immediately."""
        return self.sampler.sample()

    def get_status(self, usage: Optional[MemorySample] = None) -> MemoryStatus:
        return classify_status(usage if usage is not None else self.get_usage(), self.config)

    def calculate_trend(self) -> Trend:
        return self.trend_analyzer.calculate_trend()

    def detect_leaks(self) -> LeakSignal:
        return self.leak_detector.detect_leaks()

    def force_gc(self) -> GCResult:
        return self.gc_controller.force_gc()

    @property
    def gc_available(self) -> bool:
        return self.gc_controller.available

    def intelligent_memory_management(self) -> ManagementResult:
        return self.sampler.intelligent_memory_management()

    def get_history(self, n: Optional[int] = None) -> List[MemorySample]:
        return self.history.snapshot() if n is None else self.history.last(n)

    def get_detailed_stats(self) -> MemoryStats:
        usage = self.get_usage()
        return MemoryStats(
            current=usage,
            baseline=self.baseline,
            trend=self.calculate_trend(),
            status=classify_status(usage, self.config),
            uptime_s=process_uptime_s(),
            pid=os.getpid(),
            platform=platform.system(),
            python_version=platform.python_version(),
        )

    def generate_report(self) -> MemoryReport:
        return ReportGenerator(self, cache=self.cache).generate_report()
