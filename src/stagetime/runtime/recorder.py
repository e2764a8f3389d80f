"""Append-only checkpoint log for one observed unit of work.

A recorder captures ``start_time`` on construction and one timestamp per
``mark`` call. Durations are incremental: each entry reports the time since
the previous checkpoint, or since ``start_time`` for the first one. Time
spent between ``pause`` and ``resume`` is left out of the next entry.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .clock import Clock, monotonic_ns, to_seconds

RESERVED_FIELDS = ("name", "event", "level", "timestamp", "logger", "self")


@dataclass(frozen=True)
class Checkpoint:
    """A labelled monotonic instant."""

    label: str
    timestamp: int
    excluded: int = 0


@dataclass(frozen=True)
class ReportRecord:
    """Finalized timing breakdown of one unit of work."""

    name: str
    entries: Tuple[Tuple[str, float], ...] = ()

    @property
    def labels(self) -> List[str]:
        return [label for label, _ in self.entries]

    @property
    def total(self) -> float:
        return sum(duration for _, duration in self.entries)

    def totals(self) -> Dict[str, float]:
        """Sum durations per label, keyed in first-seen order."""
        result: Dict[str, float] = {}
        for label, duration in self.entries:
            result[label] = result.get(label, 0.0) + duration
        return result

    def items(self) -> List[Tuple[str, float]]:
        """Return entries with unique keys for key/value sinks.

        A label that repeats, or that clashes with a reserved field, gets a
        ``#n`` suffix counting its occurrences: ``io, io#2, io#3``.
        """
        counts: Dict[str, int] = {key: 1 for key in RESERVED_FIELDS}
        used = set(RESERVED_FIELDS)
        result: List[Tuple[str, float]] = []
        for label, duration in self.entries:
            count = counts.get(label, 0) + 1
            key = label if count == 1 else f"{label}#{count}"
            while key in used:
                count += 1
                key = f"{label}#{count}"
            counts[label] = count
            used.add(key)
            result.append((key, duration))
        return result


class CheckpointRecorder:
    """Thread-safe, append-only sequence of checkpoints.

    ``mark`` reads the clock and appends under one lock, so arrival order and
    timestamp order always agree. After ``close`` the recorder is finalized and
    further marks are ignored.
    """

    def __init__(self, name: str, clock: Optional[Clock] = None) -> None:
        self.name = name
        self._clock = clock or monotonic_ns
        self._lock = threading.Lock()
        self._checkpoints: List[Checkpoint] = []
        self._closed: Optional[ReportRecord] = None
        self._paused_at: Optional[int] = None
        self._excluded = 0
        self.start_time = self._clock()

    def mark(self, label: str) -> None:
        """Record ``label`` at the current instant.

        Marking while paused resumes the recorder; the paused time is not
        charged to ``label``.
        """
        with self._lock:
            if self._closed is not None:
                return
            now = self._clock()
            excluded = self._excluded
            if self._paused_at is not None:
                excluded += now - self._paused_at
                self._paused_at = None
            self._excluded = 0
            self._checkpoints.append(Checkpoint(label, now, excluded))

    def pause(self) -> None:
        """Stop charging time to the interval in progress."""
        with self._lock:
            if self._closed is None and self._paused_at is None:
                self._paused_at = self._clock()

    def resume(self) -> None:
        with self._lock:
            if self._paused_at is not None:
                self._excluded += self._clock() - self._paused_at
                self._paused_at = None

    @property
    def is_paused(self) -> bool:
        return self._paused_at is not None

    @contextmanager
    def paused(self) -> Iterator[None]:
        """Leave the block's time out of the next entry."""
        self.pause()
        try:
            yield
        finally:
            self.resume()

    @contextmanager
    def stage(self, label: str) -> Iterator[None]:
        """Mark ``label`` when the block exits, whether or not it raised."""
        try:
            yield
        finally:
            self.mark(label)

    @property
    def checkpoints(self) -> List[Checkpoint]:
        with self._lock:
            return list(self._checkpoints)

    @property
    def closed(self) -> bool:
        return self._closed is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._checkpoints)

    def finalize(self) -> ReportRecord:
        """Compute incremental durations for the checkpoints recorded so far."""
        with self._lock:
            if self._closed is not None:
                return self._closed
            snapshot = list(self._checkpoints)
        return self._build(snapshot)

    def close(self) -> ReportRecord:
        """Finalize the recorder; later marks are ignored."""
        with self._lock:
            if self._closed is None:
                self._closed = self._build(self._checkpoints)
            return self._closed

    def _build(self, checkpoints: List[Checkpoint]) -> ReportRecord:
        entries = []
        previous = self.start_time
        for checkpoint in checkpoints:
            elapsed = checkpoint.timestamp - previous - checkpoint.excluded
            entries.append((checkpoint.label, to_seconds(elapsed)))
            previous = checkpoint.timestamp
        return ReportRecord(name=self.name, entries=tuple(entries))
