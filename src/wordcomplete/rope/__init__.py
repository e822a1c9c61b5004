"""Byte-addressed intervals and deltas exchanged with the host editor."""

from .delta import Delta, DeltaBuilder, DeltaError, Replacement
from .interval import Interval

__all__ = [
    "Interval",
    "Delta",
    "DeltaBuilder",
    "DeltaError",
    "Replacement",
]
