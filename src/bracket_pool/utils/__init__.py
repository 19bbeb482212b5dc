"""Shared utilities module."""

from __future__ import annotations

from bracket_pool.utils.assertions import assert_columns, assert_unique
from bracket_pool.utils.logger import (
    VERBOSE,
    LogLevel,
    configure_logging,
    get_logger,
)

__all__ = [
    "VERBOSE",
    "LogLevel",
    "assert_columns",
    "assert_unique",
    "configure_logging",
    "get_logger",
]
