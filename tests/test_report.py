#=============================================================================
# File        : tests/test_report.py
# Project     : CacheGuard v1.0
# Component   : Report Test Suite
# Description : Report statistics, recommendations and serialization
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import json

import pytest

from cacheguard.config import MemoryConfig
from cacheguard.monitor import MemoryMonitor
from cacheguard.report import HeapStatistics, MemoryReport


@pytest.fixture
def cached_monitor(cache, provider, collector, clock):
    return MemoryMonitor(MemoryConfig(), provider=provider, collector=collector, cache=cache, clock=clock)


def categories_of(report):
    return [(r.priority, r.category) for r in report.recommendations]


class TestStatistics:

    def test_window_statistics(self, monitor, provider):
        provider.script = [10.0, 20.0, 30.0]
        for _ in range(3):
            monitor.sample()

        stats = monitor.generate_report().statistics

        assert stats.max == 30.0
        assert stats.min == 10.0
        assert stats.average == 20.0
        assert stats.samples == 3

    def test_only_report_window_is_used(self, monitor, provider):
        provider.script = [120.0] * 5 + [10.0] * 10
        for _ in range(15):
            monitor.sample()

        stats = monitor.generate_report().statistics

        assert stats.max == 10.0
        assert stats.samples == 10

    def test_empty_history_is_all_zero(self, monitor):
        report = monitor.generate_report()

        assert report.statistics == HeapStatistics()
        assert report.history == []


class TestRecommendations:

    def test_healthy_process_has_none(self, monitor):
        assert monitor.generate_report().recommendations == []

    def test_critical_status(self, monitor, provider):
        provider.script = [250.0]
        report = monitor.generate_report()

        assert report.status_level == 'critical'
        assert categories_of(report) == [('high', 'immediate')]
        assert len(report.high_priority) == 1

    def test_growing_trend(self, monitor, provider):
        provider.script = [10.0] * 5 + [15.0, 16.0, 17.0, 18.0, 20.0]
        for _ in range(10):
            monitor.sample()

        assert ('medium', 'monitoring') in categories_of(monitor.generate_report())

    def test_usage_over_twice_baseline(self, monitor, provider):
        monitor.start_monitoring()
        monitor.stop_monitoring()
        provider.script = [90.0]

        assert categories_of(monitor.generate_report()) == [('medium', 'optimization')]

    def test_gc_unavailable(self, provider, clock):
        monitor = MemoryMonitor(MemoryConfig(expose_gc=False), provider=provider, clock=clock)
        assert categories_of(monitor.generate_report()) == [('low', 'configuration')]


class TestSerialization:

    def test_to_dict_shape(self, monitor):
        monitor.sample()
        data = monitor.generate_report().to_dict()

        assert set(data) == {'summary', 'statistics', 'history', 'recommendations', 'generated_at'}
        assert data['summary']['current']['heap_used'] == 40.0
        assert data['summary']['status']['level'] == 'normal'
        assert data['summary']['trend']['direction'] == 'stable'
        assert len(data['history']) == 1

    def test_cache_report_attached(self, cached_monitor, cache):
        cache.set('pages:p1', 'hello')
        data = cached_monitor.generate_report().to_dict()

        assert data['cache']['summary']['items'] == 1
        assert 'pages' in data['cache']['categories']

    def test_to_json_round_trips(self, cached_monitor):
        report = cached_monitor.generate_report()
        parsed = json.loads(report.to_json())
        assert parsed['statistics']['samples'] == 0

    def test_summary_text(self, provider, clock, cache):
        provider.script = [250.0]
        monitor = MemoryMonitor(MemoryConfig(), provider=provider, cache=cache, clock=clock)
        text = monitor.generate_report().summary()

        assert 'CRITICAL' in text
        assert 'Cache: 0/1000 items' in text
        assert '[HIGH] immediate' in text

    def test_report_is_immutable(self, monitor):
        report = monitor.generate_report()
        assert isinstance(report, MemoryReport)
        with pytest.raises(AttributeError):
            report.recommendations = []


def test_detailed_stats(monitor):
    monitor.start_monitoring()
    monitor.stop_monitoring()
    data = monitor.get_detailed_stats().to_dict()

    assert data['baseline']['heap_used'] == 40.0
    assert data['pid'] > 0
    assert data['uptime'] >= 0
    assert data['timestamps']['baseline'] is not None
