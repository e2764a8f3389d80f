"""Checkpoint recording, emission policies and report emitters."""

from .backends import LogBackend, LoggingBackend, StructlogBackend, backend_from_config
from .clock import format_seconds, monotonic_ns, to_seconds
from .emitter import EmitterStats, ReportEmitter, configure, get_default_emitter, level_from_name
from .formatting import FormatOptions, format_report, order_entries
from .policy import AlwaysEmit, EmitPolicy, RateLimitPerWindow, SampleEveryN, policy_from_config
from .recorder import Checkpoint, CheckpointRecorder, ReportRecord
from .reporter import TimeReporter, timed_unit

__all__ = [
    "AlwaysEmit",
    "Checkpoint",
    "CheckpointRecorder",
    "EmitPolicy",
    "EmitterStats",
    "FormatOptions",
    "LogBackend",
    "LoggingBackend",
    "RateLimitPerWindow",
    "ReportEmitter",
    "ReportRecord",
    "SampleEveryN",
    "StructlogBackend",
    "TimeReporter",
    "backend_from_config",
    "configure",
    "format_report",
    "format_seconds",
    "get_default_emitter",
    "level_from_name",
    "monotonic_ns",
    "order_entries",
    "policy_from_config",
    "timed_unit",
    "to_seconds",
]
