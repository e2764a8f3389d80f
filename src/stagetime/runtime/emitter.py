"""Report emission: policy check, field shaping and best-effort forwarding."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import structlog

from stagetime.config.defaults import ReporterConfig
from stagetime.config.store import load_reporter_config, validate_reporter_config

from .backends import LogBackend, backend_from_config
from .formatting import FormatOptions
from .policy import EmitPolicy, policy_from_config
from .recorder import ReportRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EmitterStats:
    """Counters describing what happened to reports handed to an emitter."""

    emitted: int = 0
    suppressed: int = 0
    dropped: int = 0


@dataclass(frozen=True)
class _Settings:
    event: str
    level: int
    backend: LogBackend
    policy: EmitPolicy
    options: FormatOptions


def level_from_name(name: str) -> int:
    """Translate a level name such as ``"INFO"`` into its ``logging`` constant."""
    level = getattr(logging, name.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unsupported level: {name}")
    return level


class ReportEmitter:
    """Forwards finalized reports to a logging backend.

    Emission is fire-and-forget: a backend error drops the record and is only
    counted, never raised to the caller. Settings can be swapped at runtime
    with ``reconfigure``; an in-flight ``emit`` keeps the settings it started
    with.
    """

    def __init__(
        self,
        backend: Optional[LogBackend] = None,
        policy: Optional[EmitPolicy] = None,
        config: Optional[ReporterConfig] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._emitted = 0
        self._suppressed = 0
        self._dropped = 0
        self.config = config or ReporterConfig()
        self._settings = self._build_settings(self.config, backend, policy)

    @staticmethod
    def _build_settings(
        config: ReporterConfig,
        backend: Optional[LogBackend],
        policy: Optional[EmitPolicy],
    ) -> _Settings:
        validate_reporter_config(config)
        return _Settings(
            event=config.event,
            level=level_from_name(config.level),
            backend=backend or backend_from_config(config.backend, config.logger_name),
            policy=policy or policy_from_config(config.policy),
            options=FormatOptions.from_config(config.format),
        )

    @property
    def backend(self) -> LogBackend:
        return self._settings.backend

    @property
    def policy(self) -> EmitPolicy:
        return self._settings.policy

    @property
    def options(self) -> FormatOptions:
        return self._settings.options

    def reconfigure(
        self,
        config: ReporterConfig,
        backend: Optional[LogBackend] = None,
        policy: Optional[EmitPolicy] = None,
    ) -> None:
        """Replace backend, policy and formatting in one step."""
        settings = self._build_settings(config, backend, policy)
        self.config = config
        self._settings = settings
        logger.debug("emitter_reconfigured", backend=config.backend, policy=repr(settings.policy))

    def should_emit(self, record: ReportRecord) -> bool:
        return self._settings.policy.should_emit(record)

    def emit(
        self,
        record: ReportRecord,
        level: Optional[int] = None,
        options: Optional[FormatOptions] = None,
    ) -> bool:
        """Forward ``record`` if the policy allows; return whether it was sent.

        ``level`` and ``options`` override the configured ones for this record.
        """
        settings = self._settings
        if not settings.policy.should_emit(record):
            with self._lock:
                self._suppressed += 1
            return False
        try:
            settings.backend.send(
                settings.event,
                record,
                settings.level if level is None else level,
                options or settings.options,
            )
        except Exception as exc:
            with self._lock:
                self._dropped += 1
            logger.debug("report_dropped", name=record.name, error=repr(exc))
            return False
        with self._lock:
            self._emitted += 1
        return True

    def stats(self) -> EmitterStats:
        with self._lock:
            return EmitterStats(self._emitted, self._suppressed, self._dropped)


_DEFAULT_EMITTER: Optional[ReportEmitter] = None
_DEFAULT_LOCK = threading.Lock()


def get_default_emitter() -> ReportEmitter:
    """Return the process-wide emitter, built from the stored config on first use.

    An unreadable or invalid stored config falls back to the defaults so that
    reporting never raises into the caller.
    """
    global _DEFAULT_EMITTER  # noqa: PLW0603 - module level default
    with _DEFAULT_LOCK:
        if _DEFAULT_EMITTER is None:
            try:
                config = load_reporter_config()
            except (OSError, ValueError) as exc:
                logger.warning("stored_config_ignored", error=repr(exc))
                config = ReporterConfig()
            _DEFAULT_EMITTER = ReportEmitter(config=config)
        return _DEFAULT_EMITTER


def configure(
    config: ReporterConfig,
    backend: Optional[LogBackend] = None,
    policy: Optional[EmitPolicy] = None,
) -> ReportEmitter:
    """Apply ``config`` to the process-wide emitter and return it."""
    global _DEFAULT_EMITTER  # noqa: PLW0603 - module level default
    with _DEFAULT_LOCK:
        if _DEFAULT_EMITTER is None:
            _DEFAULT_EMITTER = ReportEmitter(backend=backend, policy=policy, config=config)
            return _DEFAULT_EMITTER
        emitter = _DEFAULT_EMITTER
    emitter.reconfigure(config, backend=backend, policy=policy)
    return emitter
