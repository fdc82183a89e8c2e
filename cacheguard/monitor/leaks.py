#=============================================================================
# File        : cacheguard/monitor/leaks.py
# Project     : CacheGuard v1.0
# Component   : Leak Detector - Monotonic Growth Heuristic
# Description : Flags sustained heap growth over the most recent samples
#               • Requires a full window of history
#               • Non-decreasing heap_used across the window
#               • Growth rate above threshold reported with high confidence
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, history
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_trend_and_leaks.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config import MemoryConfig
from .history import MemoryHistory

REASON_INSUFFICIENT_DATA = "insufficient data"
REASON_NO_LEAK = "no sustained memory growth detected"


@dataclass(frozen=True)
class LeakSignal:
    """Outcome of a leak check. ``reason`` is set only when nothing was detected."""
    detected: bool
    confidence: Optional[str] = None
    growth_mb: float = 0.0
    growth_rate_percent: float = 0.0
    reason: Optional[str] = None
    recommendation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.detected:
            return {'detected': False, 'reason': self.reason}
        return {
            'detected': True,
            'confidence': self.confidence,
            'growth_mb': self.growth_mb,
            'growth_rate_percent': self.growth_rate_percent,
            'recommendation': self.recommendation,
        }


class LeakDetector:
    """Checks whether heap_used grew monotonically over the last ``leak_window`` samples."""

    def __init__(self, history: MemoryHistory, config: Optional[MemoryConfig] = None) -> None:
        self.history = history
        self.config = config or MemoryConfig()

    def detect_leaks(self) -> LeakSignal:
        window = self.config.leak_window
        if len(self.history) < window:
            return LeakSignal(detected=False, reason=REASON_INSUFFICIENT_DATA)

        values = [s.heap_used for s in self.history.last(window)]
        is_increasing = all(values[i] >= values[i - 1] for i in range(1, len(values)))
        if not is_increasing or values[0] <= 0:
            return LeakSignal(detected=False, reason=REASON_NO_LEAK)

        growth = values[-1] - values[0]
        growth_rate = growth / values[0] * 100
        if growth_rate > self.config.leak_growth_threshold_percent:
            return LeakSignal(
                detected=True,
                confidence="high",
                growth_mb=round(growth, 2),
                growth_rate_percent=round(growth_rate, 2),
                recommendation="Possible memory leak, capture a heap profile for detailed analysis",
            )

        return LeakSignal(detected=False, reason=REASON_NO_LEAK)
