"""smartplan - Turn project plans into working-hours-aware schedules."""

__version__ = "0.1.0"
