"""Rendering of report records into the observable report line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from stagetime.config.defaults import FormatConfig

from .clock import format_seconds
from .recorder import ReportRecord

Entry = Tuple[str, float]


@dataclass(frozen=True)
class FormatOptions:
    """Immutable rendering options shared with backends."""

    precision: int = 9
    width: int = 11
    print_order: str = "start"

    @classmethod
    def from_config(cls, config: FormatConfig) -> "FormatOptions":
        return cls(precision=config.precision, width=config.width, print_order=config.print_order)


def order_entries(entries: Sequence[Entry], order: str = "start") -> List[Entry]:
    """Return entries in the requested print order; ``start`` keeps mark order."""
    if order == "start":
        return list(entries)
    if order == "rev_start":
        return list(reversed(entries))
    if order == "key":
        return sorted(entries, key=lambda entry: entry[0])
    if order == "rev_key":
        return sorted(entries, key=lambda entry: entry[0], reverse=True)
    if order == "inc_duration":
        return sorted(entries, key=lambda entry: entry[1])
    if order == "dec_duration":
        return sorted(entries, key=lambda entry: entry[1], reverse=True)
    raise ValueError(f"Unsupported print order: {order}")


def format_report(record: ReportRecord, options: FormatOptions = FormatOptions()) -> str:
    """Render ``name: <name>, <label>: <seconds>, ...``."""
    parts = [f"name: {record.name}"]
    for label, duration in order_entries(record.entries, options.print_order):
        parts.append(f"{label}: {format_seconds(duration, options.precision, options.width)}")
    return ", ".join(parts)
