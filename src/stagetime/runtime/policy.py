"""Emission policies bounding how many reports reach the backend."""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol, Tuple

from stagetime.config.defaults import PolicyConfig

from .clock import NANOS_PER_SECOND, Clock, monotonic_ns
from .recorder import ReportRecord


class EmitPolicy(Protocol):
    """Decides whether a finalized report is forwarded."""

    def should_emit(self, record: ReportRecord) -> bool:
        ...


class AlwaysEmit:
    """Forward every report."""

    def should_emit(self, record: ReportRecord) -> bool:
        return True

    def __repr__(self) -> str:
        return "AlwaysEmit()"


class SampleEveryN:
    """Forward the first report and then one in every ``n``."""

    def __init__(self, n: int) -> None:
        if n < 1:
            raise ValueError("n must be at least 1")
        self.n = n
        self._seen = 0
        self._lock = threading.Lock()

    def should_emit(self, record: ReportRecord) -> bool:
        with self._lock:
            index = self._seen
            self._seen += 1
        return index % self.n == 0

    def __repr__(self) -> str:
        return f"SampleEveryN(n={self.n})"


class RateLimitPerWindow:
    """Forward at most ``max_per_window`` reports per name in each tumbling window."""

    def __init__(self, window_s: float, max_per_window: int = 1, clock: Optional[Clock] = None) -> None:
        if window_s <= 0:
            raise ValueError("window_s must be positive")
        if max_per_window < 1:
            raise ValueError("max_per_window must be at least 1")
        self.window_s = window_s
        self.max_per_window = max_per_window
        self._window_ns = int(window_s * NANOS_PER_SECOND)
        self._clock = clock or monotonic_ns
        self._windows: Dict[str, Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def should_emit(self, record: ReportRecord) -> bool:
        now = self._clock()
        with self._lock:
            window_start, count = self._windows.get(record.name, (now, 0))
            if now - window_start >= self._window_ns:
                window_start, count = now, 0
            if count >= self.max_per_window:
                return False
            self._windows[record.name] = (window_start, count + 1)
            return True

    def __repr__(self) -> str:
        return f"RateLimitPerWindow(window_s={self.window_s}, max_per_window={self.max_per_window})"


def policy_from_config(config: PolicyConfig, clock: Optional[Clock] = None) -> EmitPolicy:
    """Build the policy named by ``config.kind``."""
    if config.kind == "always":
        return AlwaysEmit()
    if config.kind == "sample":
        return SampleEveryN(config.every_n)
    if config.kind == "rate_limit":
        return RateLimitPerWindow(config.window_s, config.max_per_window, clock=clock)
    raise ValueError(f"Unsupported policy kind: {config.kind}")
