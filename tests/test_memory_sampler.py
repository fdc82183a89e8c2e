#=============================================================================
# File        : tests/test_memory_sampler.py
# Project     : CacheGuard v1.0
# Component   : Memory Sampler Test Suite
# Description : Baseline, bounded history, status and corrective actions
#               • Idempotent start/stop with one-time baseline
#               • Ring buffer retention
#               • Threshold classification and management actions
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import time

import pytest

from cacheguard.config import MemoryConfig
from cacheguard.monitor import MemoryMonitor, classify_status
from cacheguard.sampling import MemorySample
from conftest import CountingCollector, ScriptedProvider


def make_sample(heap_used, external=0.0):
    return MemorySample(timestamp=0.0, rss=heap_used, heap_total=heap_used,
                        heap_used=heap_used, external=external, array_buffers=0.0)


class TestLifecycle:

    def test_baseline_captured_on_first_start(self, monitor):
        assert monitor.baseline is None
        assert monitor.start_monitoring() is True
        try:
            assert monitor.baseline.heap_used == 40.0
        finally:
            monitor.stop_monitoring()

    def test_baseline_not_replaced_on_restart(self, monitor, provider):
        monitor.start_monitoring()
        monitor.stop_monitoring()
        baseline = monitor.baseline

        provider.script = [95.0]
        monitor.start_monitoring()
        monitor.stop_monitoring()

        assert monitor.baseline is baseline
        assert monitor.get_usage().heap_used == 95.0

    def test_start_and_stop_are_idempotent(self, monitor):
        assert monitor.start_monitoring() is True
        assert monitor.start_monitoring() is False
        assert monitor.is_monitoring

        monitor.stop_monitoring()
        monitor.stop_monitoring()
        assert not monitor.is_monitoring

    def test_background_sampling(self):
        provider = ScriptedProvider([30.0])
        monitor = MemoryMonitor(MemoryConfig(monitor_interval_s=0.05), provider=provider,
                                collector=CountingCollector())
        monitor.start_monitoring()
        try:
            deadline = time.time() + 2.0
            while len(monitor.history) < 2 and time.time() < deadline:
                time.sleep(0.02)
        finally:
            monitor.stop_monitoring()

        assert len(monitor.history) >= 2
        assert monitor.sampler.last_status.level == 'normal'


class TestHistory:

    def test_history_keeps_last_twenty(self, monitor, provider):
        provider.script = [float(v) for v in range(1, 26)]
        for _ in range(25):
            monitor.sample()

        history = monitor.get_history()
        assert len(history) == 20
        assert history[0].heap_used == 6.0
        assert history[-1].heap_used == 25.0

    def test_custom_retention(self, provider, collector, clock):
        monitor = MemoryMonitor(MemoryConfig(snapshot_retention=3), provider=provider,
                                collector=collector, clock=clock)
        for _ in range(5):
            monitor.sample()
        assert len(monitor.history) == 3

    def test_get_history_last_n(self, monitor, provider):
        provider.script = [1.0, 2.0, 3.0]
        for _ in range(3):
            monitor.sample()
        assert [s.heap_used for s in monitor.get_history(2)] == [2.0, 3.0]


class TestStatus:

    @pytest.mark.parametrize("heap_used,level", [
        (50.0, 'normal'),
        (100.0, 'normal'),
        (100.01, 'warning'),
        (200.0, 'warning'),
        (200.5, 'critical'),
    ])
    def test_classification(self, heap_used, level):
        status = classify_status(make_sample(heap_used), MemoryConfig())
        assert status.level == level
        assert str(heap_used) in status.message

    def test_sample_records_status(self, monitor, provider):
        provider.script = [250.0]
        monitor.sample()
        assert monitor.sampler.last_status.level == 'critical'


class TestManagementActions:

    def test_normal_reading_has_no_actions(self, monitor):
        result = monitor.sample()
        assert result.actions == []
        assert result.to_dict()['actions_performed'] == []

    def test_high_heap_triggers_gc(self, monitor, provider, collector):
        provider.script = [160.0]
        result = monitor.sample()

        assert result.action_names == ['garbage_collection']
        assert collector.calls == 1
        assert result.actions[0].result.success

    def test_external_memory_warning(self, provider, collector, clock):
        provider.external_mb = 60.0
        monitor = MemoryMonitor(MemoryConfig(), provider=provider, collector=collector, clock=clock)

        result = monitor.sample()

        assert result.action_names == ['external_memory_warning']
        assert '60.0MB' in result.actions[0].reason

    def test_growth_triggers_leak_warning(self, monitor, provider):
        provider.script = [10.0] * 5 + [15.0, 16.0, 17.0, 18.0, 20.0]
        results = [monitor.sample() for _ in range(10)]

        assert results[-1].action_names == ['leak_warning']
        assert results[-1].actions[0].reason == 'memory growth rate: 72.0%'

    def test_gc_skipped_without_capability(self, provider, clock):
        provider.script = [160.0]
        monitor = MemoryMonitor(MemoryConfig(expose_gc=False), provider=provider, clock=clock)

        result = monitor.intelligent_memory_management()

        gc_action = result.actions[0]
        assert gc_action.action == 'garbage_collection'
        assert gc_action.result.success is False

    def test_management_result_serializes(self, monitor, provider):
        provider.script = [160.0]
        data = monitor.sample().to_dict()

        assert data['memory_usage']['heap_used'] == 160.0
        assert data['actions_performed'][0]['result']['success'] is True
