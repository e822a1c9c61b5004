"""Runtime services: telemetry and logging setup."""

from . import logfile, telemetry

__all__ = ["logfile", "telemetry"]
