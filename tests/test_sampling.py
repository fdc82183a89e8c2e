#=============================================================================
# File        : tests/test_sampling.py
# Project     : CacheGuard v1.0
# Component   : Sampling Test Suite
# Description : Memory providers, tracker and sample conversion
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import time

import psutil

from cacheguard.sampling import (
    MEMORY_FIELDS,
    MemorySample,
    MemoryTracker,
    NullProvider,
    PsutilProvider,
    ResourceProvider,
    detect_provider,
    process_uptime_s,
    to_mb,
)
from conftest import MB, ScriptedProvider


class TestMemorySample:

    def test_to_mb_rounds_to_two_decimals(self):
        assert to_mb(MB) == 1.0
        assert to_mb(1.5 * MB) == 1.5
        assert to_mb(1234567) == 1.18

    def test_from_bytes(self):
        sample = MemorySample.from_bytes({
            'rss': 100 * MB,
            'heap_total': 80 * MB,
            'heap_used': 60 * MB,
            'external': 5 * MB,
            'array_buffers': 0.5 * MB,
        }, timestamp=42.0)

        assert sample.timestamp == 42.0
        assert sample.usage() == {
            'rss': 100.0,
            'heap_total': 80.0,
            'heap_used': 60.0,
            'external': 5.0,
            'array_buffers': 0.5,
        }
        assert sample.to_dict()['timestamp'] == 42.0

    def test_missing_fields_default_to_zero(self):
        sample = MemorySample.from_bytes({'rss': MB}, timestamp=0.0)
        assert sample.heap_used == 0.0
        assert sample.rss == 1.0


class TestProviders:

    def test_psutil_provider_reads_current_process(self):
        reading = PsutilProvider().read()

        assert set(reading) == set(MEMORY_FIELDS)
        assert reading['rss'] > 0
        assert reading['heap_used'] > 0

    def test_psutil_provider_without_full_info_uses_rss(self):
        reading = PsutilProvider(use_full_info=False).read()
        assert reading['heap_used'] == reading['rss']

    def test_resource_provider_shape(self):
        assert set(ResourceProvider().read()) == set(MEMORY_FIELDS)

    def test_null_provider(self):
        assert all(v == 0 for v in NullProvider().read().values())

    def test_detect_prefers_psutil(self):
        assert isinstance(detect_provider(), PsutilProvider)


class TestMemoryTracker:

    def test_samples_use_injected_clock(self, clock):
        tracker = MemoryTracker(ScriptedProvider([12.5]), clock=clock)
        sample = tracker.sample()

        assert sample.heap_used == 12.5
        assert sample.timestamp == clock.now

    def test_provider_type_and_availability(self):
        assert MemoryTracker(NullProvider()).is_available() is False
        assert MemoryTracker(NullProvider()).get_provider_type() == 'NullProvider'
        assert MemoryTracker(ScriptedProvider()).is_available() is True

    def test_default_provider(self):
        assert MemoryTracker().get_provider_type() == 'PsutilProvider'


def test_process_uptime():
    uptime = process_uptime_s()
    assert 0.0 <= uptime < time.time() - psutil.boot_time() + 1
