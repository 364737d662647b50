"""Runtime services shared by every scopeline component."""

from . import telemetry

__all__ = ["telemetry"]
