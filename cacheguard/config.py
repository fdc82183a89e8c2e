#=============================================================================
# File        : cacheguard/config.py
# Project     : CacheGuard v1.0
# Component   : Configuration - Cache and Memory Monitor Settings
# Description : Deploy-time configuration with validation and env overrides
#               • Cache capacity, TTL presets and cleanup thresholds
#               • Memory monitor thresholds and sampling interval
#               • Trend and leak heuristics exposed as tunables
#               • Kill-switch and immutable runtime config
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, Type Literals
# Standards   : PEP 8, Type Hints, Immutable Configuration
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Cache and memory monitor settings)
# Dependencies: dataclasses, typing, os
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_config.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Literal

CategoryName = Literal["pages", "api_keys", "stats", "performance", "memory", "quick"]

# Preset TTLs in seconds per logical cache category
TTL_PRESETS: Mapping[str, float] = {
    "pages": 10 * 60,
    "api_keys": 30 * 60,
    "stats": 2 * 60,
    "performance": 60,
    "memory": 30,
    "quick": 10,
}

# Key prefixes used by the category wrappers
CATEGORY_PREFIXES: Mapping[str, str] = {
    "pages": "pages",
    "api_keys": "apikeys",
    "stats": "stats",
    "performance": "perf",
    "memory": "memory",
    "quick": "quick",
}


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None: return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None: return default
    try:
        return float(v)
    except ValueError:
        return default

def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None: return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class CacheConfig:
    """Cache manager settings. Times are in seconds, sizes in MB."""
    default_ttl_s: float = 5 * 60
    max_items: int = 1000
    cleanup_interval_s: float = 60.0
    low_hit_rate_threshold: float = 0.3
    low_hit_rate_min_items: int = 100
    memory_threshold_mb: float = 50.0
    ttl_presets: Mapping[str, float] = field(default_factory=lambda: dict(TTL_PRESETS))

    def __post_init__(self):
        if self.max_items <= 0:
            raise ValueError(f"max_items must be positive, got {self.max_items}")
        if self.default_ttl_s <= 0:
            raise ValueError(f"default_ttl_s must be positive, got {self.default_ttl_s}")
        if self.cleanup_interval_s <= 0:
            raise ValueError(f"cleanup_interval_s must be positive, got {self.cleanup_interval_s}")

        hr = min(1.0, max(0.0, self.low_hit_rate_threshold))
        object.__setattr__(self, "low_hit_rate_threshold", hr)
        object.__setattr__(self, "memory_threshold_mb", max(0.0, self.memory_threshold_mb))

    def ttl_for(self, category: str) -> float:
        """Preset TTL for a category, or the default TTL for unknown ones."""
        return self.ttl_presets.get(category, self.default_ttl_s)

    @staticmethod
    def from_env(base: Optional["CacheConfig"] = None) -> "CacheConfig":
        """
        Overlay environment variables on a base config.
        Supported envs:
          CACHEGUARD_DEFAULT_TTL_S
          CACHEGUARD_MAX_ITEMS
          CACHEGUARD_CLEANUP_INTERVAL_S
          CACHEGUARD_MEMORY_THRESHOLD_MB
          CACHEGUARD_LOW_HIT_RATE_THRESHOLD
        """
        base = base or CacheConfig()
        return replace(
            base,
            default_ttl_s=_env_float("CACHEGUARD_DEFAULT_TTL_S", base.default_ttl_s),
            max_items=_env_int("CACHEGUARD_MAX_ITEMS", base.max_items),
            cleanup_interval_s=_env_float("CACHEGUARD_CLEANUP_INTERVAL_S", base.cleanup_interval_s),
            memory_threshold_mb=_env_float("CACHEGUARD_MEMORY_THRESHOLD_MB", base.memory_threshold_mb),
            low_hit_rate_threshold=_env_float("CACHEGUARD_LOW_HIT_RATE_THRESHOLD", base.low_hit_rate_threshold),
        )


@dataclass(frozen=True)
class MemoryConfig:
    """
    Memory monitor settings.

    The trend and leak knobs keep the values the service shipped with;
    they are heuristics, not measured limits.
    """
    warning_threshold_mb: float = 100.0
    critical_threshold_mb: float = 200.0
    gc_threshold_mb: float = 150.0
    monitor_interval_s: float = 30.0
    snapshot_retention: int = 20
    external_warning_mb: float = 50.0
    expose_gc: bool = True

    # Trend analysis
    trend_window: int = 5
    trend_stable_band_percent: float = 2.0
    trend_high_confidence_samples: int = 10

    # Leak heuristics
    leak_window: int = 5
    leak_growth_threshold_percent: float = 20.0
    leak_warning_rate_percent: float = 10.0

    # Report rules
    report_window: int = 10
    report_trend_rate_percent: float = 5.0
    baseline_growth_factor: float = 2.0

    def __post_init__(self):
        if self.monitor_interval_s <= 0:
            raise ValueError(f"monitor_interval_s must be positive, got {self.monitor_interval_s}")
        if self.snapshot_retention < 1:
            raise ValueError(f"snapshot_retention must be >= 1, got {self.snapshot_retention}")
        if self.trend_window < 1 or self.leak_window < 2:
            raise ValueError("trend_window must be >= 1 and leak_window >= 2")
        if self.warning_threshold_mb > self.critical_threshold_mb:
            raise ValueError("warning_threshold_mb cannot exceed critical_threshold_mb")

    @staticmethod
    def from_env(base: Optional["MemoryConfig"] = None) -> "MemoryConfig":
        """
        Overlay environment variables on a base config.
        Supported envs:
          CACHEGUARD_WARNING_THRESHOLD_MB
          CACHEGUARD_CRITICAL_THRESHOLD_MB
          CACHEGUARD_GC_THRESHOLD_MB
          CACHEGUARD_MONITOR_INTERVAL_S
          CACHEGUARD_SNAPSHOT_RETENTION
          CACHEGUARD_EXPOSE_GC (0|1)
        """
        base = base or MemoryConfig()
        return replace(
            base,
            warning_threshold_mb=_env_float("CACHEGUARD_WARNING_THRESHOLD_MB", base.warning_threshold_mb),
            critical_threshold_mb=_env_float("CACHEGUARD_CRITICAL_THRESHOLD_MB", base.critical_threshold_mb),
            gc_threshold_mb=_env_float("CACHEGUARD_GC_THRESHOLD_MB", base.gc_threshold_mb),
            monitor_interval_s=_env_float("CACHEGUARD_MONITOR_INTERVAL_S", base.monitor_interval_s),
            snapshot_retention=_env_int("CACHEGUARD_SNAPSHOT_RETENTION", base.snapshot_retention),
            expose_gc=_env_bool("CACHEGUARD_EXPOSE_GC", base.expose_gc),
        )


@dataclass(frozen=True)
class CacheGuardConfig:
    """
    Top-level configuration handed to the composition root.

    Safety defaults:
      - manual GC allowed
      - debug logging off
      - kill switch off (CACHEGUARD_KILL_SWITCH=1 disables background work)
    """
    cache: CacheConfig = field(default_factory=CacheConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    debug_mode: bool = False
    kill_switch: bool = False

    @staticmethod
    def from_env(base: Optional["CacheGuardConfig"] = None) -> "CacheGuardConfig":
        base = base or CacheGuardConfig()
        return replace(
            base,
            cache=CacheConfig.from_env(base.cache),
            memory=MemoryConfig.from_env(base.memory),
            debug_mode=_env_bool("CACHEGUARD_DEBUG", base.debug_mode),
            kill_switch=_env_bool("CACHEGUARD_KILL_SWITCH", base.kill_switch),
        )

    def merge(self, **overrides) -> "CacheGuardConfig":
        """Return a copy with provided fields overridden (immutably)."""
        return replace(self, **overrides)

    def is_enabled(self) -> bool:
        return not self.kill_switch

    def to_dict(self) -> Dict[str, object]:
        return {
            "cache": {
                "default_ttl_s": self.cache.default_ttl_s,
                "max_items": self.cache.max_items,
                "cleanup_interval_s": self.cache.cleanup_interval_s,
                "low_hit_rate_threshold": self.cache.low_hit_rate_threshold,
                "memory_threshold_mb": self.cache.memory_threshold_mb,
                "ttl_presets": dict(self.cache.ttl_presets),
            },
            "memory": {
                "warning_threshold_mb": self.memory.warning_threshold_mb,
                "critical_threshold_mb": self.memory.critical_threshold_mb,
                "gc_threshold_mb": self.memory.gc_threshold_mb,
                "monitor_interval_s": self.memory.monitor_interval_s,
                "snapshot_retention": self.memory.snapshot_retention,
                "expose_gc": self.memory.expose_gc,
            },
            "debug_mode": self.debug_mode,
            "kill_switch": self.kill_switch,
        }

    def __repr__(self) -> str:
        return (f"CacheGuardConfig(max_items={self.cache.max_items}, "
                f"cleanup_interval_s={self.cache.cleanup_interval_s}, "
                f"monitor_interval_s={self.memory.monitor_interval_s}, "
                f"expose_gc={self.memory.expose_gc}, kill_switch={self.kill_switch})")
