"""Per-stage checkpoint timing with one structured report per unit of work."""

from stagetime.config import ReporterConfig
from stagetime.runtime import (
    AlwaysEmit,
    CheckpointRecorder,
    FormatOptions,
    LoggingBackend,
    RateLimitPerWindow,
    ReportEmitter,
    ReportRecord,
    SampleEveryN,
    StructlogBackend,
    TimeReporter,
    configure,
    format_report,
    get_default_emitter,
    timed_unit,
)

__version__ = "0.1.0"

__all__ = [
    "AlwaysEmit",
    "CheckpointRecorder",
    "FormatOptions",
    "LoggingBackend",
    "RateLimitPerWindow",
    "ReportEmitter",
    "ReportRecord",
    "ReporterConfig",
    "SampleEveryN",
    "StructlogBackend",
    "TimeReporter",
    "configure",
    "format_report",
    "get_default_emitter",
    "timed_unit",
]
