#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CacheGuard Demo Script - Cache Pressure and Memory Growth

Fills the cache past its capacity and memory threshold, then grows the
process heap on purpose so the monitor's trend, leak and GC paths fire.

Usage:
    python examples/cache_pressure_demo.py              # Default run
    python examples/cache_pressure_demo.py --quick      # Smaller, faster run
    python examples/cache_pressure_demo.py --json       # Print the final report as JSON
"""

import argparse
import sys
import time
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cacheguard import CacheConfig, CacheGuard, CacheGuardConfig, MemoryConfig


class CachePressureDemo:
    """Drives one CacheGuard instance through capacity and memory pressure."""

    def __init__(self, quick: bool = False):
        self.rounds = 5 if quick else 10
        self.page_count = 300 if quick else 1500
        config = CacheGuardConfig(
            cache=CacheConfig(max_items=1000, memory_threshold_mb=5.0),
            memory=MemoryConfig(monitor_interval_s=1.0),
        )
        self.guard = CacheGuard(config)
        self.ballast = []

    def print_banner(self, title: str):
        print(f"\n{'='*60}")
        print(f"  {title}")
        print(f"{'='*60}")

    def fill_cache(self):
        """Insert more pages than the cache can hold."""
        self.print_banner("CACHE CAPACITY")
        pages = self.guard.categories.pages
        for i in range(self.page_count):
            pages.set(f"page{i}", {"id": f"page{i}", "html": "<p>" + "x" * 4000 + "</p>"})

        for i in range(0, self.page_count, 3):
            pages.get(f"page{i}")

        stats = self.guard.cache.get_stats()
        print(f"Items: {stats['items']}/{stats['max_items']}  "
              f"evictions: {stats['operations']['evictions']}  "
              f"hit rate: {stats['hit_rate']}%  memory: {stats['memory_usage_mb']} MB")

    def run_cleanup(self):
        """One cleanup pass: expiry sweep plus memory-pressure rules."""
        self.print_banner("CLEANUP UNDER MEMORY PRESSURE")
        self.guard.cache.cleanup()
        stats = self.guard.cache.get_stats()
        print(f"Items after cleanup: {stats['items']}  "
              f"forced removals: {stats['operations']['forced_removals']}  "
              f"memory: {stats['memory_usage_mb']} MB")

    def grow_heap(self):
        """Allocate ballast every round so the sampler sees steady growth."""
        self.print_banner("MEMORY GROWTH")
        for round_no in range(self.rounds):
            self.ballast.append(bytearray(8 * 1024 * 1024))
            result = self.guard.memory.sample()
            usage = result.memory_usage
            actions = ", ".join(result.action_names) or "none"
            print(f"Round {round_no + 1:2d}: heap_used {usage.heap_used:8.2f} MB  actions: {actions}")
            time.sleep(0.1)

        signal = self.guard.memory.detect_leaks()
        if signal.detected:
            print(f"Leak suspected: +{signal.growth_mb} MB ({signal.growth_rate_percent}%)")
        else:
            print(f"No leak detected: {signal.reason}")

    def release(self):
        self.print_banner("MANUAL GC")
        self.ballast.clear()
        result = self.guard.memory.force_gc()
        if result.success:
            print(f"Freed {result.freed:.2f} MB in {result.gc_time_ms:.2f} ms")
        else:
            print(f"GC unavailable: {result.error}")

    def run(self, as_json: bool = False):
        with self.guard:
            self.fill_cache()
            self.run_cleanup()
            self.grow_heap()
            self.release()

            report = self.guard.generate_report()
            self.print_banner("REPORT")
            print(report.to_json() if as_json else report.summary())


def main():
    parser = argparse.ArgumentParser(description="CacheGuard cache pressure demo")
    parser.add_argument('--quick', action='store_true', help='Smaller, faster run')
    parser.add_argument('--json', action='store_true', help='Print the final report as JSON')
    args = parser.parse_args()

    CachePressureDemo(quick=args.quick).run(as_json=args.json)
    return 0


if __name__ == '__main__':
    sys.exit(main())
