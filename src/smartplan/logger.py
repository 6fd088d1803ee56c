"""Logging setup for smartplan with scheduling-oriented verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels sit between the standard ones
PLACEMENTS_LEVEL = 25  # Between INFO (20) and WARNING (30) - verbosity 1
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - verbosity 2

logging.addLevelName(PLACEMENTS_LEVEL, "PLACEMENTS")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0  # Errors only
VERBOSITY_PLACEMENTS = 1  # Where each task landed
VERBOSITY_CHECKS = 2  # Queue decisions, dependency checks
VERBOSITY_DEBUG = 3  # Calendar arithmetic step by step

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_PLACEMENTS: PLACEMENTS_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class SmartplanLogger(logging.Logger):
    """Logger with one method per scheduling verbosity level.

    - placements(): level 1, the computed start/end of each task
    - checks(): level 2, graph walking and dependency checks
    - debug(): level 3, calendar arithmetic details
    """

    def placements(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a task placement (verbosity level 1)."""
        if self.isEnabledFor(PLACEMENTS_LEVEL):
            self._log(PLACEMENTS_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a dependency or queue check (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> SmartplanLogger:
    """Return the shared ``smartplan`` logger."""
    logging.setLoggerClass(SmartplanLogger)
    logger = logging.getLogger("smartplan")
    assert isinstance(logger, SmartplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the smartplan logger for a verbosity level.

    Safe to call repeatedly; existing handlers are replaced.

    Args:
        verbosity: 0=silent (errors only), 1=placements, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.DEBUG if verbosity > 3 else logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only logging."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def placements_enabled() -> bool:
    """True when verbosity >= 1."""
    return get_logger().isEnabledFor(PLACEMENTS_LEVEL)


def checks_enabled() -> bool:
    """True when verbosity >= 2."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    """True when verbosity >= 3."""
    return get_logger().isEnabledFor(logging.DEBUG)
