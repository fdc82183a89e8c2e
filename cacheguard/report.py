#=============================================================================
# File        : cacheguard/report.py
# Project     : CacheGuard v1.0
# Component   : Report - Memory and Cache Report Generation
# Description : Structured reports for admin endpoints and the CLI
#               • Current/baseline usage, status and trend summary
#               • Min/max/average heap usage over the recent window
#               • Rule-based recommendations with priorities
#               • Cache detailed report attached when a cache is present
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, JSON
# Standards   : PEP 8, Type Hints, Immutable Data Structures
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Memory monitor reports)
# Dependencies: json, statistics, datetime, dataclasses, typing
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_report.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import json
import statistics
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional

if TYPE_CHECKING:
    from .cache.manager import CacheManager
    from .monitor.monitor import MemoryMonitor, MemoryStats
    from .sampling import MemorySample

Priority = Literal["high", "medium", "low"]

PRIORITY_RANK = {'high': 3, 'medium': 2, 'low': 1}


@dataclass(frozen=True)
class Recommendation:
    priority: Priority
    category: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {'priority': self.priority, 'category': self.category, 'message': self.message}


@dataclass(frozen=True)
class HeapStatistics:
    """heap_used statistics over the report window, all zero when it is empty."""
    max: float = 0.0
    min: float = 0.0
    average: float = 0.0
    samples: int = 0

    @classmethod
    def from_samples(cls, samples: List["MemorySample"]) -> "HeapStatistics":
        if not samples:
            return cls()
        values = [s.heap_used for s in samples]
        return cls(
            max=round(max(values), 2),
            min=round(min(values), 2),
            average=round(statistics.mean(values), 2),
            samples=len(values),
        )

    def to_dict(self) -> Dict[str, float]:
        return {'max': self.max, 'min': self.min, 'average': self.average, 'samples': self.samples}


@dataclass(frozen=True)
class MemoryReport:
    """
    Immutable memory report.

    ``cache`` holds the cache manager's detailed report when the monitor
    was wired to a cache.
    """
    stats: "MemoryStats"
    statistics: HeapStatistics
    history: List["MemorySample"]
    recommendations: List[Recommendation] = field(default_factory=list)
    cache: Optional[Dict[str, Any]] = None
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def status_level(self) -> str:
        return self.stats.status.level

    @property
    def high_priority(self) -> List[Recommendation]:
        return [r for r in self.recommendations if r.priority == 'high']

    def to_dict(self) -> Dict[str, Any]:
        stats = self.stats.to_dict()
        data = {
            'summary': {
                'current': stats['current'],
                'baseline': stats['baseline'],
                'status': stats['status'],
                'trend': stats['trend'],
            },
            'statistics': self.statistics.to_dict(),
            'history': [s.to_dict() for s in self.history],
            'recommendations': [r.to_dict() for r in self.recommendations],
            'generated_at': self.generated_at,
        }
        if self.cache is not None:
            data['cache'] = self.cache
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate human-readable summary."""
        current = self.stats.current
        trend = self.stats.trend
        lines = [
            f"CacheGuard Memory Report ({self.generated_at})",
            f" Status: {self.stats.status.level.upper()} - {self.stats.status.message}",
            f" Heap used: {current.heap_used:.2f} MB (rss {current.rss:.2f} MB)",
            f" Trend: {trend.direction} ({trend.rate:+.2f}%, {trend.confidence} confidence)",
            f" Window: min {self.statistics.min:.2f} / avg {self.statistics.average:.2f} / "
            f"max {self.statistics.max:.2f} MB over {self.statistics.samples} samples",
        ]
        if self.stats.baseline is not None:
            lines.append(f" Baseline heap used: {self.stats.baseline.heap_used:.2f} MB")

        if self.cache is not None:
            summary = self.cache['summary']
            lines.append(f" Cache: {summary['items']}/{summary['max_items']} items, "
                         f"hit rate {summary['hit_rate']:.2f}%, {summary['memory_usage_mb']:.2f} MB")

        if self.recommendations:
            lines.append("\nRecommendations:")
            ranked = sorted(self.recommendations, key=lambda r: PRIORITY_RANK[r.priority], reverse=True)
            for i, rec in enumerate(ranked, 1):
                lines.append(f"  {i}. [{rec.priority.upper()}] {rec.category}: {rec.message}")

        return "\n".join(lines)


class ReportGenerator:
    """Builds MemoryReport objects from a monitor and an optional cache."""

    def __init__(self, monitor: "MemoryMonitor", cache: Optional["CacheManager"] = None) -> None:
        self.monitor = monitor
        self.cache = cache
        self.config = monitor.config

    def generate_report(self) -> MemoryReport:
        stats = self.monitor.get_detailed_stats()
        history = self.monitor.get_history(self.config.report_window)
        return MemoryReport(
            stats=stats,
            statistics=HeapStatistics.from_samples(history),
            history=history,
            recommendations=self.generate_recommendations(stats, self.monitor.gc_available),
            cache=self.cache.get_detailed_report() if self.cache is not None else None,
        )

    def generate_recommendations(self, stats: "MemoryStats", gc_available: bool) -> List[Recommendation]:
        recommendations = []

        if stats.status.level == 'critical':
            recommendations.append(Recommendation(
                priority='high',
                category='immediate',
                message='Check for memory leaks and large object references now',
            ))

        if stats.trend.is_increasing and stats.trend.rate > self.config.report_trend_rate_percent:
            recommendations.append(Recommendation(
                priority='medium',
                category='monitoring',
                message='Memory usage keeps growing, increase the monitoring frequency',
            ))

        baseline = stats.baseline
        if baseline is not None and stats.current.heap_used > baseline.heap_used * self.config.baseline_growth_factor:
            recommendations.append(Recommendation(
                priority='medium',
                category='optimization',
                message=(f'Memory usage is over {self.config.baseline_growth_factor:g}x the baseline, '
                         f'review allocation hot spots'),
            ))

        if not gc_available:
            recommendations.append(Recommendation(
                priority='low',
                category='configuration',
                message='Enable manual garbage collection with CACHEGUARD_EXPOSE_GC=1',
            ))

        return recommendations
