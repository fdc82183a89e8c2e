#=============================================================================
# File        : cacheguard/scheduling.py
# Project     : CacheGuard v1.0
# Component   : Scheduling - Cancellable Repeating Background Tasks
# Description : Fixed-interval background work for cache and memory timers
#               • Daemon thread waiting on a stop event between runs
#               • Explicit cancel handle with bounded join
#               • Callback errors logged, timer kept alive
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Extracted from the background scanner)
# Dependencies: threading, logging_utils
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_scheduling.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import threading
from typing import Callable, Optional

from .logging_utils import get_logger

_logger = get_logger(__name__)


class RepeatingTask:
    """
    Run ``callback`` every ``interval_s`` seconds on a daemon thread.

    The first run happens one interval after ``start()``. ``cancel()``
    discards all future runs; a run already in progress finishes.
    """

    def __init__(self, interval_s: float, callback: Callable[[], object], name: str = "CacheGuard-Task") -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.interval_s = interval_s
        self.name = name
        self._callback = callback
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()
        self.run_count = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the timer. Returns False if it was already running."""
        with self._lock:
            if self.is_running:
                return False
            # Each run owns its stop event; a loop outliving cancel() stays stopped
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._loop, args=(self._stop_event,),
                                            name=self.name, daemon=True)
            self._thread.start()
            return True

    def cancel(self, timeout: float = 2.0) -> None:
        """Stop the timer. Safe to call repeatedly."""
        with self._lock:
            thread = self._thread
            self._thread = None
            if self._stop_event is not None:
                self._stop_event.set()

        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _loop(self, stop_event: threading.Event) -> None:
        _logger.debug(f"{self.name} started (interval {self.interval_s}s)")
        while not stop_event.wait(self.interval_s):
            # Runs never overlap, even across a restart
            with self._run_lock:
                if stop_event.is_set():
                    break
                try:
                    self._callback()
                    self.run_count += 1
                except Exception:
                    _logger.exception(f"Error in {self.name}")
        _logger.debug(f"{self.name} stopped")
