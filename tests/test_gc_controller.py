#=============================================================================
# File        : tests/test_gc_controller.py
# Project     : CacheGuard v1.0
# Component   : GC Controller Test Suite
# Description : Manual collection results, capability gating and failures
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

from cacheguard.config import MemoryConfig
from cacheguard.monitor import (
    GCController,
    MemoryMonitor,
    NullGarbageCollector,
    PythonGarbageCollector,
)
from cacheguard.monitor.gc_controller import GC_UNAVAILABLE
from cacheguard.sampling import MemoryTracker
from conftest import CountingCollector, FailingCollector, ScriptedProvider


class TestForceGC:

    def test_freed_is_before_minus_after(self):
        tracker = MemoryTracker(ScriptedProvider([180.0, 150.5]))
        result = GCController(tracker, CountingCollector(collected=12)).force_gc()

        assert result.success
        assert result.before.heap_used == 180.0
        assert result.after.heap_used == 150.5
        assert result.freed == 29.5
        assert result.gc_time_ms >= 0
        assert result.collected_objects == 12

    def test_negative_freed_is_reported_as_is(self):
        tracker = MemoryTracker(ScriptedProvider([100.0, 104.25]))
        result = GCController(tracker, CountingCollector()).force_gc()

        assert result.success
        assert result.freed == -4.25

    def test_timer_measures_collection(self):
        ticks = iter([10.0, 10.25])
        tracker = MemoryTracker(ScriptedProvider())
        result = GCController(tracker, CountingCollector(), timer=lambda: next(ticks)).force_gc()

        assert result.gc_time_ms == 250.0

    def test_unavailable_collector(self):
        tracker = MemoryTracker(ScriptedProvider())
        controller = GCController(tracker, NullGarbageCollector())
        result = controller.force_gc()

        assert controller.available is False
        assert result.success is False
        assert result.error == GC_UNAVAILABLE
        assert result.to_dict() == {'success': False, 'error': GC_UNAVAILABLE}

    def test_collector_failure_becomes_result(self):
        tracker = MemoryTracker(ScriptedProvider())
        result = GCController(tracker, FailingCollector()).force_gc()

        assert result.success is False
        assert 'collector exploded' in result.error

    def test_python_collector(self):
        tracker = MemoryTracker(ScriptedProvider())
        result = GCController(tracker, PythonGarbageCollector()).force_gc()

        assert result.success
        assert result.collected_objects >= 0

    def test_default_collector_is_python(self):
        controller = GCController(MemoryTracker(ScriptedProvider()))
        assert isinstance(controller.collector, PythonGarbageCollector)

    def test_to_dict(self):
        tracker = MemoryTracker(ScriptedProvider([50.0, 45.0]))
        data = GCController(tracker, CountingCollector()).force_gc().to_dict()

        assert data['success'] is True
        assert data['before']['heap_used'] == 50.0
        assert data['after']['heap_used'] == 45.0
        assert data['freed'] == 5.0


class TestMonitorGC:

    def test_monitor_gc_available(self, monitor):
        assert monitor.gc_available
        assert monitor.force_gc().success

    def test_expose_gc_disabled(self, provider, clock):
        monitor = MemoryMonitor(MemoryConfig(expose_gc=False), provider=provider, clock=clock)

        assert monitor.gc_available is False
        assert monitor.force_gc().success is False
