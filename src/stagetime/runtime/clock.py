"""Monotonic timestamp source and duration rendering."""

from __future__ import annotations

from time import perf_counter_ns
from typing import Callable

Clock = Callable[[], int]

NANOS_PER_SECOND = 1_000_000_000

monotonic_ns: Clock = perf_counter_ns


def to_seconds(nanos: int) -> float:
    """Convert a nanosecond count into float seconds."""
    return nanos / NANOS_PER_SECOND


def format_seconds(seconds: float, precision: int = 9, width: int = 11) -> str:
    """Render seconds left-aligned, padded to ``width`` with ``precision`` decimals."""
    return f"{seconds:<{width}.{precision}f}"
