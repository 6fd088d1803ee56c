"""Global CLI state shared between the root callback and commands."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path


class _Context:
    """Values set by global CLI options."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.current_time: datetime | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Path given with --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    _context.config_path = path


def get_current_time() -> datetime | None:
    """Instant given with --current-time; None means the wall clock."""
    return _context.current_time


def set_current_time(value: datetime | None) -> None:
    _context.current_time = value
