#=============================================================================
# File        : cacheguard/monitor/__init__.py
# Project     : CacheGuard v1.0
# Component   : Monitor Package - Memory Subsystem Exports
# Description : Package initialization for the memory monitor
#               • Sampler with bounded history and baseline
#               • Trend analysis and monotonic-growth leak detection
#               • Capability-gated garbage collection
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Statistical Detection
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: history, sampler, trend, leaks, gc_controller, monitor
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_memory_sampler.py, tests/test_report.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from .history import MemoryHistory
from .trend import Trend, TrendAnalyzer
from .leaks import LeakDetector, LeakSignal
from .gc_controller import (
    GarbageCollector,
    PythonGarbageCollector,
    NullGarbageCollector,
    GCController,
    GCResult,
)
from .sampler import (
    MemorySampler,
    MemoryStatus,
    ManagementAction,
    ManagementResult,
    classify_status,
)
from .monitor import MemoryMonitor, MemoryStats

__all__ = [
    "MemoryHistory",
    "Trend",
    "TrendAnalyzer",
    "LeakDetector",
    "LeakSignal",
    "GarbageCollector",
    "PythonGarbageCollector",
    "NullGarbageCollector",
    "GCController",
    "GCResult",
    "MemorySampler",
    "MemoryStatus",
    "ManagementAction",
    "ManagementResult",
    "classify_status",
    "MemoryMonitor",
    "MemoryStats",
]
