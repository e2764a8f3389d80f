"""Default configuration definitions for checkpoint time reporting."""

from dataclasses import dataclass, field


@dataclass
class PolicyConfig:
    """Emission policy used to bound report volume."""

    kind: str = "always"
    every_n: int = 2
    window_s: float = 1.0
    max_per_window: int = 1


@dataclass
class FormatConfig:
    """Rendering of durations in the report line."""

    precision: int = 9
    width: int = 11
    print_order: str = "start"


@dataclass
class ReporterConfig:
    """Base configuration for reporters and the default emitter."""

    event: str = "time-report"
    level: str = "INFO"
    backend: str = "logging"
    logger_name: str = "stagetime.report"
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    format: FormatConfig = field(default_factory=FormatConfig)


LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
BACKENDS = ("logging", "structlog")
POLICY_KINDS = ("always", "sample", "rate_limit")
PRINT_ORDERS = ("start", "rev_start", "key", "rev_key", "inc_duration", "dec_duration")
