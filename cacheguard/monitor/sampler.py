#=============================================================================
# File        : cacheguard/monitor/sampler.py
# Project     : CacheGuard v1.0
# Component   : Memory Sampler - Periodic Sampling and Corrective Actions
# Description : Background collector of process memory readings
#               • One-time baseline captured on first start
#               • Bounded history fed every monitor interval
#               • Threshold status classification (normal/warning/critical)
#               • Threshold-driven GC, leak and external-memory actions
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, sampling, scheduling, history, trend, gc_controller
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_memory_sampler.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional

from ..config import MemoryConfig
from ..logging_utils import get_logger
from ..sampling import MemorySample, MemoryTracker
from ..scheduling import RepeatingTask
from .gc_controller import GCController, GCResult
from .history import MemoryHistory
from .trend import TrendAnalyzer

_logger = get_logger(__name__)

StatusLevel = Literal["normal", "warning", "critical"]


@dataclass(frozen=True)
class MemoryStatus:
    level: StatusLevel
    message: str
    recommendation: str

    @property
    def is_normal(self) -> bool:
        return self.level == "normal"

    def to_dict(self) -> Dict[str, str]:
        return {'level': self.level, 'message': self.message, 'recommendation': self.recommendation}


def classify_status(usage: MemorySample, config: MemoryConfig) -> MemoryStatus:
    """Classify heap_used against the fixed warning/critical thresholds."""
    heap_used = usage.heap_used
    if heap_used > config.critical_threshold_mb:
        return MemoryStatus(
            level="critical",
            message=f"Memory usage critical: {heap_used}MB",
            recommendation="Run garbage collection now and check for memory leaks",
        )
    if heap_used > config.warning_threshold_mb:
        return MemoryStatus(
            level="warning",
            message=f"Memory usage high: {heap_used}MB",
            recommendation="Watch the memory trend and consider optimizing hot paths",
        )
    return MemoryStatus(
        level="normal",
        message=f"Memory usage normal: {heap_used}MB",
        recommendation="Keep monitoring",
    )


@dataclass(frozen=True)
class ManagementAction:
    action: str
    reason: str
    recommendation: Optional[str] = None
    result: Optional[GCResult] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'action': self.action, 'reason': self.reason}
        if self.recommendation is not None:
            data['recommendation'] = self.recommendation
        if self.result is not None:
            data['result'] = self.result.to_dict()
        return data


@dataclass(frozen=True)
class ManagementResult:
    timestamp: float
    memory_usage: MemorySample
    actions: List[ManagementAction] = field(default_factory=list)

    @property
    def action_names(self) -> List[str]:
        return [a.action for a in self.actions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'memory_usage': self.memory_usage.usage(),
            'actions_performed': [a.to_dict() for a in self.actions],
        }


class MemorySampler:
    """
    Samples process memory every ``monitor_interval_s`` into a bounded history
    and applies threshold-driven corrective actions after each sample.
    """

    def __init__(self, tracker: MemoryTracker, history: MemoryHistory,
                 trend_analyzer: TrendAnalyzer, gc_controller: GCController,
                 config: Optional[MemoryConfig] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.tracker = tracker
        self.history = history
        self.trend_analyzer = trend_analyzer
        self.gc_controller = gc_controller
        self.config = config or MemoryConfig()
        self._clock = clock
        self._lock = threading.RLock()
        self._baseline: Optional[MemorySample] = None
        self._task: Optional[RepeatingTask] = None
        self.last_status: Optional[MemoryStatus] = None

    @property
    def baseline(self) -> Optional[MemorySample]:
        return self._baseline

    @property
    def is_monitoring(self) -> bool:
        task = self._task
        return task is not None and task.is_running

    def get_usage(self) -> MemorySample:
        return self.tracker.sample()

    def start_monitoring(self) -> bool:
        """Start periodic sampling. Returns False (no-op) when already running."""
        with self._lock:
            if self.is_monitoring:
                _logger.warning("Memory monitoring already running")
                return False

            if self._baseline is None:
                self._baseline = self.tracker.sample()
                _logger.info(f"Memory baseline set: heap_used={self._baseline.heap_used}MB, "
                             f"rss={self._baseline.rss}MB")

            self._task = RepeatingTask(self.config.monitor_interval_s, self.sample,
                                       name="CacheGuard-MemorySampler")
            self._task.start()

        _logger.info(f"Memory monitoring started (interval {self.config.monitor_interval_s}s)")
        return True

    def stop_monitoring(self) -> None:
        with self._lock:
            task = self._task
            self._task = None
        if task is not None:
            task.cancel()
            _logger.info("Memory monitoring stopped")

    def sample(self) -> ManagementResult:
        """One monitor tick: record a sample, classify it, act on it."""
        usage = self.tracker.sample()
        self.history.append(usage)

        status = classify_status(usage, self.config)
        self.last_status = status
        if not status.is_normal:
            _logger.warning(status.message)

        result = self.intelligent_memory_management(usage)
        if result.actions:
            _logger.info(f"Memory management actions performed: {len(result.actions)} "
                         f"({', '.join(result.action_names)})")
        return result

    def intelligent_memory_management(self, usage: Optional[MemorySample] = None) -> ManagementResult:
        """Apply GC, leak-warning and external-memory rules to a reading."""
        if usage is None:
            usage = self.tracker.sample()
        actions: List[ManagementAction] = []

        if usage.heap_used > self.config.gc_threshold_mb:
            actions.append(ManagementAction(
                action="garbage_collection",
                reason=f"heap usage above {self.config.gc_threshold_mb}MB threshold",
                result=self.gc_controller.force_gc(),
            ))

        trend = self.trend_analyzer.calculate_trend()
        if trend.is_increasing and trend.rate > self.config.leak_warning_rate_percent:
            actions.append(ManagementAction(
                action="leak_warning",
                reason=f"memory growth rate: {trend.rate}%",
                recommendation="Check for possible memory leaks",
            ))

        if usage.external > self.config.external_warning_mb:
            actions.append(ManagementAction(
                action="external_memory_warning",
                reason=f"external memory usage: {usage.external}MB",
                recommendation="Check file handles and external resources",
            ))

        return ManagementResult(timestamp=self._clock(), memory_usage=usage, actions=actions)
