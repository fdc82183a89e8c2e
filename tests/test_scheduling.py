#=============================================================================
# File        : tests/test_scheduling.py
# Project     : CacheGuard v1.0
# Component   : Repeating Task Test Suite
# Description : Start/cancel semantics of the background timer
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-08-27
#=============================================================================

import threading
import time

import pytest

from cacheguard.scheduling import RepeatingTask


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while not predicate() and time.time() < deadline:
        time.sleep(0.01)
    return predicate()


class TestRepeatingTask:

    def test_runs_repeatedly(self):
        calls = []
        task = RepeatingTask(0.02, lambda: calls.append(1), name="test-task")
        assert task.start()
        try:
            assert wait_until(lambda: len(calls) >= 3)
        finally:
            task.cancel()

        assert task.run_count >= 3
        assert not task.is_running

    def test_first_run_after_one_interval(self):
        calls = []
        task = RepeatingTask(10.0, lambda: calls.append(1))
        task.start()
        task.cancel()
        assert calls == []

    def test_double_start_is_noop(self):
        task = RepeatingTask(10.0, lambda: None)
        assert task.start() is True
        try:
            assert task.start() is False
        finally:
            task.cancel()

    def test_cancel_is_idempotent(self):
        task = RepeatingTask(10.0, lambda: None)
        task.cancel()
        task.start()
        task.cancel()
        task.cancel()
        assert not task.is_running

    def test_restart_after_cancel(self):
        task = RepeatingTask(10.0, lambda: None)
        task.start()
        task.cancel()
        assert task.start() is True
        task.cancel()

    def test_restart_during_slow_run_never_overlaps(self):
        lock = threading.Lock()
        state = {'active': 0, 'peak': 0, 'runs': 0}
        entered = threading.Event()

        def slow():
            with lock:
                state['active'] += 1
                state['peak'] = max(state['peak'], state['active'])
            entered.set()
            time.sleep(0.3)
            with lock:
                state['active'] -= 1
                state['runs'] += 1

        task = RepeatingTask(0.02, slow, name="slow-task")
        task.start()
        assert entered.wait(2.0)
        old_thread = next(t for t in threading.enumerate() if t.name == "slow-task")

        task.cancel(timeout=0.05)
        assert old_thread.is_alive()
        assert task.start() is True
        try:
            assert wait_until(lambda: state['runs'] >= 3, timeout=3.0)
        finally:
            task.cancel()

        old_thread.join(timeout=2.0)
        assert not old_thread.is_alive()
        assert state['peak'] == 1

    def test_callback_errors_do_not_stop_timer(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first run fails")

        task = RepeatingTask(0.02, flaky)
        task.start()
        try:
            assert wait_until(lambda: len(calls) >= 2)
        finally:
            task.cancel()

    def test_thread_is_daemon(self):
        task = RepeatingTask(10.0, lambda: None, name="daemon-check")
        task.start()
        try:
            thread = next(t for t in threading.enumerate() if t.name == "daemon-check")
            assert thread.daemon
        finally:
            task.cancel()

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            RepeatingTask(0, lambda: None)
