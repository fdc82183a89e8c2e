#=============================================================================
# File        : cacheguard/monitor/trend.py
# Project     : CacheGuard v1.0
# Component   : Trend Analyzer - Heap Usage Direction and Rate
# Description : Window-average comparison of recent vs older samples
#               • Direction: stable / increasing / decreasing
#               • Percentage change rate between windows
#               • Confidence from the amount of history available
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Statistical Analysis
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: statistics, config, history
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_trend_and_leaks.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from ..config import MemoryConfig
from .history import MemoryHistory

Direction = Literal["stable", "increasing", "decreasing"]
Confidence = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class Trend:
    """Direction and rate (percent) of heap usage change."""
    direction: Direction = "stable"
    rate: float = 0.0
    confidence: Confidence = "low"

    @property
    def is_increasing(self) -> bool:
        return self.direction == "increasing"

    def to_dict(self) -> Dict[str, Any]:
        return {'direction': self.direction, 'rate': self.rate, 'confidence': self.confidence}


class TrendAnalyzer:
    """
    Compares the average heap_used of the last ``trend_window`` samples with
    the ``trend_window`` samples before them.
    """

    def __init__(self, history: MemoryHistory, config: Optional[MemoryConfig] = None) -> None:
        self.history = history
        self.config = config or MemoryConfig()

    def calculate_trend(self) -> Trend:
        samples = self.history.snapshot()
        if len(samples) < 2:
            return Trend()

        window = self.config.trend_window
        recent = samples[-window:]
        older = samples[-2 * window:-window]
        if not older:
            return Trend()

        recent_avg = statistics.mean(s.heap_used for s in recent)
        older_avg = statistics.mean(s.heap_used for s in older)
        if older_avg == 0:
            # No meaningful base to compute a percentage from
            return Trend(confidence="low")

        rate = (recent_avg - older_avg) / older_avg * 100

        if abs(rate) < self.config.trend_stable_band_percent:
            direction = "stable"
        elif rate > 0:
            direction = "increasing"
        else:
            direction = "decreasing"

        confidence = "high" if len(samples) >= self.config.trend_high_confidence_samples else "medium"
        return Trend(direction=direction, rate=round(rate, 2), confidence=confidence)
