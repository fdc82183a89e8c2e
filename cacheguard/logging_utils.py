#=============================================================================
# File        : cacheguard/logging_utils.py
# Project     : CacheGuard v1.0
# Component   : Logging - Safe Logger Defaults
# Description : Module loggers with production-safe defaults
#               • WARN/ERROR only unless debug mode is enabled
#               • Console handler only when the host app has none
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, logging
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Shared by cache and monitor modules)
# Dependencies: logging
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_core.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging

PACKAGE_LOGGER = "cacheguard"
LOG_FORMAT = '[CacheGuard] %(levelname)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger with safe defaults.

    The package logger carries the level and the console handler so that
    child loggers inherit both and hosts can reconfigure in one place.
    """
    root_pkg = logging.getLogger(PACKAGE_LOGGER)
    if root_pkg.level == logging.NOTSET:
        root_pkg.setLevel(logging.WARNING)  # Only WARN/ERROR by default

    # Add console handler only if none exists
    if not root_pkg.handlers and not logging.getLogger().handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_pkg.addHandler(console_handler)

    return logging.getLogger(name)


def set_debug(enabled: bool) -> None:
    """Switch the package logger between DEBUG and the WARNING default."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if enabled else logging.WARNING)
