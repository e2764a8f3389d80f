from __future__ import annotations

from typing import List, Tuple

import pytest

from stagetime.runtime import emitter as emitter_module
from stagetime.runtime.formatting import FormatOptions
from stagetime.runtime.recorder import ReportRecord


class FakeClock:
    """Nanosecond clock that only moves when told to."""

    def __init__(self, start_ns: int = 1_000_000_000) -> None:
        self.now = start_ns

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(round(seconds * 1_000_000_000))


class RecordingBackend:
    """Backend stub keeping every report it is sent."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, ReportRecord, int]] = []
        self.options: List[FormatOptions] = []

    def send(self, event: str, record: ReportRecord, level: int, options: FormatOptions) -> None:
        self.sent.append((event, record, level))
        self.options.append(options)

    @property
    def records(self) -> List[ReportRecord]:
        return [record for _, record, _ in self.sent]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def fresh_default_emitter(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate the process-wide emitter and its config file per test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(emitter_module, "_DEFAULT_EMITTER", None)
