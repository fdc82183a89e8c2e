#=============================================================================
# File        : cacheguard/sampling.py
# Project     : CacheGuard v1.0
# Component   : Sampling - Process Memory Measurement
# Description : Cross-platform process memory readings for the monitor
#               • MemorySample value type (MB, 2 decimals)
#               • psutil provider with resident/unique/shared breakdown
#               • Fallback provider using the resource module
#               • Null provider when measurement is unavailable
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, psutil (optional), resource (fallback)
# Standards   : PEP 8, Type Hints, Cross-platform Compatibility
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Heap-style breakdown for the memory monitor)
# Dependencies: os, time, tracemalloc, psutil (optional), resource (fallback)
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_sampling.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import time
import tracemalloc
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from .logging_utils import get_logger

_logger = get_logger(__name__)

_MB = 1024 * 1024

MEMORY_FIELDS = ("rss", "heap_total", "heap_used", "external", "array_buffers")


def to_mb(num_bytes: float) -> float:
    """Convert bytes to MB rounded to 2 decimals."""
    return round(num_bytes / _MB, 2)


@dataclass(frozen=True)
class MemorySample:
    """
    One immutable reading of process memory, all values in MB.

    Field mapping for CPython:
      rss           - resident set size
      heap_total    - virtual memory size reserved by the process
      heap_used     - unique set size (memory freed if the process exited),
                      resident size when USS is not readable
      external      - shared resident pages (libraries, mmaps)
      array_buffers - bytes traced by tracemalloc, 0 when it is not tracing
    """
    timestamp: float
    rss: float
    heap_total: float
    heap_used: float
    external: float
    array_buffers: float

    @classmethod
    def from_bytes(cls, reading: Dict[str, float], timestamp: Optional[float] = None) -> "MemorySample":
        return cls(
            timestamp=time.time() if timestamp is None else timestamp,
            **{name: to_mb(reading.get(name, 0)) for name in MEMORY_FIELDS}
        )

    def usage(self) -> Dict[str, float]:
        """The five memory fields without the timestamp."""
        return {name: getattr(self, name) for name in MEMORY_FIELDS}

    def to_dict(self) -> Dict[str, float]:
        data = self.usage()
        data['timestamp'] = self.timestamp
        return data


@runtime_checkable
class MemoryProvider(Protocol):
    """Protocol for memory measurement providers. Readings are in bytes."""

    def read(self) -> Dict[str, float]:
        """Return a dict with the MEMORY_FIELDS keys, values in bytes."""
        ...


def _traced_bytes() -> int:
    if tracemalloc.is_tracing():
        return tracemalloc.get_traced_memory()[0]
    return 0


class PsutilProvider:
    """Memory provider using psutil (preferred)."""

    def __init__(self, use_full_info: bool = True) -> None:
        try:
            import psutil
            self._psutil = psutil
            self._process = psutil.Process(os.getpid())
        except ImportError:
            raise ImportError("psutil not available")
        self._use_full_info = use_full_info

    def _unique_bytes(self, fallback: int) -> int:
        if not self._use_full_info:
            return fallback
        try:
            return getattr(self._process.memory_full_info(), 'uss', fallback)
        except (self._psutil.Error, OSError):
            # USS needs /proc/<pid>/smaps or equivalent; stop asking once denied
            self._use_full_info = False
            return fallback

    def read(self) -> Dict[str, float]:
        try:
            info = self._process.memory_info()
        except (self._psutil.Error, OSError) as e:
            _logger.debug(f"psutil memory_info failed: {e}")
            return {name: 0 for name in MEMORY_FIELDS}

        return {
            'rss': info.rss,
            'heap_total': info.vms,
            'heap_used': self._unique_bytes(info.rss),
            'external': getattr(info, 'shared', 0),
            'array_buffers': _traced_bytes(),
        }


class ResourceProvider:
    """Fallback memory provider using resource module."""

    def read(self) -> Dict[str, float]:
        try:
            import resource
            # On Linux ru_maxrss is in KB, on macOS in bytes
            maxrss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
            rss = maxrss if maxrss > _MB else maxrss * 1024
        except (ImportError, OSError, ValueError):
            rss = 0
        return {
            'rss': rss,
            'heap_total': rss,
            'heap_used': rss,
            'external': 0,
            'array_buffers': _traced_bytes(),
        }


class NullProvider:
    """Null memory provider when no measurement is available."""

    def read(self) -> Dict[str, float]:
        return {name: 0 for name in MEMORY_FIELDS}


def detect_provider() -> MemoryProvider:
    """Auto-detect the best available memory provider."""
    try:
        return PsutilProvider()
    except ImportError:
        pass

    provider = ResourceProvider()
    if provider.read()['rss'] > 0:
        return provider

    return NullProvider()


class MemoryTracker:
    """
    Turns raw provider readings into MemorySample values.

    Automatically selects the best available memory provider:
    1. psutil (most accurate, cross-platform)
    2. resource module (Unix fallback)
    3. null provider (measurement disabled)
    """

    def __init__(self, provider: Optional[MemoryProvider] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self._provider = provider if provider is not None else detect_provider()
        self._clock = clock

    def sample(self) -> MemorySample:
        return MemorySample.from_bytes(self._provider.read(), timestamp=self._clock())

    def is_available(self) -> bool:
        """Check if memory measurement is available."""
        return not isinstance(self._provider, NullProvider)

    def get_provider_type(self) -> str:
        return type(self._provider).__name__


def process_uptime_s() -> float:
    """Seconds since this process started (psutil), 0.0 when unknown."""
    try:
        import psutil
    except ImportError:
        return 0.0
    try:
        return max(0.0, time.time() - psutil.Process(os.getpid()).create_time())
    except (psutil.Error, OSError):
        return 0.0
