"""Project logging for the bracket pool.

Everything logs under the ``bracket_pool`` logger.  Modules obtain their
logger with ``get_logger(__name__)``; the CLI calls
:func:`configure_logging` once from its ``--log-level`` option (or the
``BRACKET_POOL_LOG_LEVEL`` environment variable).

What each level shows:

* ``QUIET``: warnings and errors only.
* ``NORMAL``: loader summaries ("Loaded 32 result(s) ...", "Ranked 12 entries").
* ``VERBOSE``: every pick edit, including rejected picks and the downstream
  picks a change cleared, and every saved bracket record.
* ``DEBUG``: engine internals such as stale picks ignored during
  propagation and per-bracket scoring totals.
"""

from __future__ import annotations

import enum
import logging
import os
import sys

#: Custom level between INFO and DEBUG, used for pick edits and record saves.
VERBOSE: int = 15

logging.addLevelName(VERBOSE, "VERBOSE")

_ROOT_LOGGER_NAME: str = "bracket_pool"
_ENV_VAR: str = "BRACKET_POOL_LOG_LEVEL"
_LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


class LogLevel(str, enum.Enum):
    """Verbosity accepted by ``--log-level`` and ``BRACKET_POOL_LOG_LEVEL``."""

    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"

    @property
    def numeric(self) -> int:
        """Return the :mod:`logging` level number."""
        return _NUMERIC[self]


_NUMERIC: dict[LogLevel, int] = {
    LogLevel.QUIET: logging.WARNING,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: VERBOSE,
    LogLevel.DEBUG: logging.DEBUG,
}


def _resolve(level: LogLevel | str | None) -> LogLevel:
    raw = level if level is not None else os.environ.get(_ENV_VAR, LogLevel.NORMAL.value)
    if isinstance(raw, LogLevel):
        return raw
    try:
        return LogLevel(raw.strip().upper())
    except ValueError:
        msg = f"Unknown log level {raw!r}. Valid levels: {', '.join(lvl.value for lvl in LogLevel)}"
        raise ValueError(msg) from None


def configure_logging(level: LogLevel | str | None = None) -> LogLevel:
    """Attach a single stderr handler to the ``bracket_pool`` logger.

    An explicit *level* wins over ``BRACKET_POOL_LOG_LEVEL``, which wins
    over ``NORMAL``.  Calling again replaces the previous handler.

    Returns:
        The level that was applied.

    Raises:
        ValueError: If the level name is not one of :class:`LogLevel`.
    """
    resolved = _resolve(level)

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(resolved.numeric)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    return resolved


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the ``bracket_pool`` hierarchy.

    Module names (``__name__``) are used as they are; short names such as
    ``"cli"`` are prefixed, giving ``bracket_pool.cli``.
    """
    if name == _ROOT_LOGGER_NAME or name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
