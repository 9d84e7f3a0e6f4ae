"""Package-local logging utilities.

This package is a library first. Records emitted under the ``kupli`` namespace
are disabled until the host application opts in. CLI users can opt into logs
via ``KUPLI_LOG_LEVEL`` or the ``--log-level`` / ``-v`` flags.

Only the sink added here is ever removed; sinks owned by the host stay put.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from loguru import logger

LOGGER_NAME = "kupli"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name} | {message}"
_KNOWN_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

logger.disable(LOGGER_NAME)

_sink_id: Optional[int] = None


def _remove_sink() -> None:
    global _sink_id
    if _sink_id is None:
        return
    try:
        logger.remove(_sink_id)
    except ValueError:
        # Already removed by the host, for example via a bare logger.remove().
        pass
    _sink_id = None


def configure_logging(level: str | None = None) -> None:
    """Configure package logging for CLI/runtime diagnostics.

    This is intentionally opt-in. If neither ``level`` nor
    ``KUPLI_LOG_LEVEL`` is provided, package records stay disabled.
    Calling it again replaces the stderr sink added by the previous call.
    """
    global _sink_id
    env_level = os.getenv("KUPLI_LOG_LEVEL", "")
    raw_level = level if level is not None else (env_level or "")
    resolved_level = raw_level.strip().upper()
    _remove_sink()

    if not resolved_level:
        logger.disable(LOGGER_NAME)
        return

    if resolved_level not in _KNOWN_LEVELS:
        resolved_level = "INFO"
    _sink_id = logger.add(sys.stderr, level=resolved_level, format=LOG_FORMAT, filter=LOGGER_NAME)
    logger.enable(LOGGER_NAME)


__all__ = ["LOGGER_NAME", "configure_logging", "logger"]
