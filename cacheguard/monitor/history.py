#=============================================================================
# File        : cacheguard/monitor/history.py
# Project     : CacheGuard v1.0
# Component   : Memory History - Bounded Sample Ring Buffer
# Description : FIFO buffer of MemorySample readings shared by analyzers
#               • Oldest sample dropped on overflow
#               • Thread-safe snapshots for trend and leak analysis
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, collections.deque, Threading
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: collections, threading, sampling
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_memory_sampler.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterable, List, Optional

from ..sampling import MemorySample


class MemoryHistory:
    """Ring buffer of the most recent memory samples."""

    def __init__(self, capacity: int = 20, samples: Optional[Iterable[MemorySample]] = None) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._samples: Deque[MemorySample] = deque(samples or (), maxlen=capacity)
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def append(self, sample: MemorySample) -> None:
        with self._lock:
            self._samples.append(sample)

    def snapshot(self) -> List[MemorySample]:
        with self._lock:
            return list(self._samples)

    def last(self, n: int) -> List[MemorySample]:
        if n <= 0:
            return []
        with self._lock:
            return list(self._samples)[-n:]

    def latest(self) -> Optional[MemorySample]:
        with self._lock:
            return self._samples[-1] if self._samples else None

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"MemoryHistory(samples={len(self._samples)}, capacity={self.capacity})"
