#=============================================================================
# File        : tests/conftest.py
# Project     : CacheGuard v1.0
# Component   : Shared Test Fixtures
# Description : Deterministic clock, memory readings and collectors
#               • Fake clock advanced explicitly by tests
#               • Scripted memory provider replaying heap_used values
#               • Counting and failing garbage collectors
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add cacheguard to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from cacheguard.config import CacheConfig, MemoryConfig
from cacheguard.cache import CacheManager
from cacheguard.monitor import MemoryMonitor

MB = 1024 * 1024


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class ScriptedProvider:
    """
    Memory provider replaying a list of heap_used values (MB).

    The last value repeats once the script is exhausted.
    """

    def __init__(self, heap_used_mb: Optional[List[float]] = None,
                 external_mb: float = 10.0, rss_mb: float = 80.0):
        self.script = list(heap_used_mb or [40.0])
        self.external_mb = external_mb
        self.rss_mb = rss_mb
        self.reads = 0

    def push(self, *values: float) -> None:
        self.script.extend(values)

    def read(self) -> Dict[str, float]:
        index = min(self.reads, len(self.script) - 1)
        self.reads += 1
        heap_used = self.script[index]
        return {
            'rss': self.rss_mb * MB,
            'heap_total': (heap_used + 20) * MB,
            'heap_used': heap_used * MB,
            'external': self.external_mb * MB,
            'array_buffers': 0,
        }


class CountingCollector:
    def __init__(self, collected: int = 7):
        self.collected = collected
        self.calls = 0

    @property
    def available(self) -> bool:
        return True

    def collect(self) -> int:
        self.calls += 1
        return self.collected


class FailingCollector:
    @property
    def available(self) -> bool:
        return True

    def collect(self) -> int:
        raise RuntimeError("collector exploded")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Cache with a 1000-item capacity on a fake clock."""
    return CacheManager(CacheConfig(), clock=clock)


@pytest.fixture
def small_cache(clock):
    return CacheManager(CacheConfig(max_items=3), clock=clock)


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def collector():
    return CountingCollector()


@pytest.fixture
def monitor(provider, collector, clock):
    """Memory monitor reading scripted values."""
    return MemoryMonitor(MemoryConfig(), provider=provider, collector=collector, clock=clock)
