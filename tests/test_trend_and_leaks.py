#=============================================================================
# File        : tests/test_trend_and_leaks.py
# Project     : CacheGuard v1.0
# Component   : Trend Analysis and Leak Detection Test Suite
# Description : Window averages, confidence levels and monotonic growth
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import pytest

from cacheguard.config import MemoryConfig
from cacheguard.monitor import LeakDetector, MemoryHistory, TrendAnalyzer
from cacheguard.monitor.leaks import REASON_INSUFFICIENT_DATA, REASON_NO_LEAK
from cacheguard.sampling import MemorySample


def history_of(values, capacity=20):
    samples = [
        MemorySample(timestamp=float(i), rss=v, heap_total=v, heap_used=v, external=0.0, array_buffers=0.0)
        for i, v in enumerate(values)
    ]
    return MemoryHistory(capacity, samples)


def trend_of(values, config=None):
    return TrendAnalyzer(history_of(values), config or MemoryConfig()).calculate_trend()


def leaks_of(values, config=None):
    return LeakDetector(history_of(values), config or MemoryConfig()).detect_leaks()


class TestTrendAnalyzer:

    def test_increasing_trend_with_full_window(self):
        trend = trend_of([10, 10, 10, 10, 10, 15, 16, 17, 18, 20])

        assert trend.direction == 'increasing'
        assert trend.rate == 72.0
        assert trend.confidence == 'high'

    def test_decreasing_trend(self):
        trend = trend_of([20, 20, 20, 20, 20, 10, 10, 10, 10, 10])

        assert trend.direction == 'decreasing'
        assert trend.rate == -50.0

    def test_stable_within_band(self):
        trend = trend_of([100, 100, 100, 100, 100, 101, 101, 101, 101, 101])

        assert trend.direction == 'stable'
        assert trend.rate == 1.0

    def test_medium_confidence_below_ten_samples(self):
        trend = trend_of([10, 10, 10, 20, 20, 20])

        assert trend.confidence == 'medium'
        assert trend.direction == 'increasing'

    @pytest.mark.parametrize("values", [[], [10], [10, 11, 12, 13, 14]])
    def test_not_enough_history(self, values):
        trend = trend_of(values)

        assert trend.direction == 'stable'
        assert trend.rate == 0.0
        assert trend.confidence == 'low'

    def test_zero_baseline_window(self):
        trend = trend_of([0, 0, 0, 0, 0, 5, 5, 5, 5, 5])
        assert trend.direction == 'stable'
        assert trend.confidence == 'low'

    def test_only_last_two_windows_count(self):
        trend = trend_of([500] * 10 + [10] * 5 + [15, 16, 17, 18, 20])
        assert trend.rate == 72.0

    def test_to_dict(self):
        assert trend_of([]).to_dict() == {'direction': 'stable', 'rate': 0.0, 'confidence': 'low'}


class TestLeakDetector:

    def test_monotonic_growth_detected(self):
        signal = leaks_of([50, 55, 60, 65, 70])

        assert signal.detected
        assert signal.confidence == 'high'
        assert signal.growth_mb == 20.0
        assert signal.growth_rate_percent == 40.0
        assert signal.recommendation

    def test_non_monotonic_not_detected(self):
        signal = leaks_of([50, 48, 52, 49, 51])

        assert not signal.detected
        assert signal.reason == REASON_NO_LEAK

    def test_flat_plateaus_count_as_growth(self):
        assert leaks_of([50, 50, 60, 60, 70]).detected

    def test_slow_growth_below_threshold(self):
        signal = leaks_of([100, 102, 104, 106, 110])
        assert not signal.detected

    def test_insufficient_data(self):
        signal = leaks_of([50, 60, 70, 80])

        assert not signal.detected
        assert signal.reason == REASON_INSUFFICIENT_DATA
        assert signal.to_dict() == {'detected': False, 'reason': 'insufficient data'}

    def test_only_last_window_is_checked(self):
        assert leaks_of([90, 10, 50, 55, 60, 65, 70]).detected

    def test_zero_start_not_detected(self):
        assert not leaks_of([0, 10, 20, 30, 40]).detected

    def test_configurable_threshold(self):
        config = MemoryConfig(leak_growth_threshold_percent=5.0)
        assert leaks_of([100, 102, 104, 106, 110], config).detected
