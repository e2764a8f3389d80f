"""Adapters forwarding report records to a logging backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import structlog

from .formatting import FormatOptions, format_report, order_entries
from .recorder import ReportRecord


class LogBackend(Protocol):
    """Accepts one named event with its ordered timing fields."""

    def send(self, event: str, record: ReportRecord, level: int, options: FormatOptions) -> None:
        ...


class LoggingBackend:
    """Writes one line per report through the standard ``logging`` module."""

    def __init__(self, logger_name: str = "stagetime.report") -> None:
        self.logger = logging.getLogger(logger_name)

    def send(self, event: str, record: ReportRecord, level: int, options: FormatOptions) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            "%s",
            format_report(record, options),
            extra={
                "report_event": event,
                "report_name": record.name,
                "timings": order_entries(record.entries, options.print_order),
            },
        )


class StructlogBackend:
    """Emits one structured event per report with a keyword per checkpoint."""

    def __init__(self, logger: Optional[Any] = None, logger_name: str = "stagetime.report") -> None:
        self.logger = logger or structlog.get_logger(logger_name)

    def send(self, event: str, record: ReportRecord, level: int, options: FormatOptions) -> None:
        fields: Dict[str, Any] = {"name": record.name}
        for key, duration in order_entries(record.items(), options.print_order):
            fields[key] = round(duration, options.precision)
        self.logger.log(level, event, **fields)


def backend_from_config(name: str, logger_name: str = "stagetime.report") -> LogBackend:
    """Build the backend called ``name``."""
    if name == "logging":
        return LoggingBackend(logger_name)
    if name == "structlog":
        return StructlogBackend(logger_name=logger_name)
    raise ValueError(f"Unsupported backend: {name}")
