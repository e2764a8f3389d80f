"""Scoped time reporting: one reporter per unit of work, one report per scope."""

from __future__ import annotations

import functools
import inspect
import threading
from typing import Any, Callable, ContextManager, Optional, TypeVar, Union

from .clock import Clock
from .emitter import ReportEmitter, get_default_emitter, level_from_name
from .formatting import FormatOptions
from .recorder import CheckpointRecorder, ReportRecord

F = TypeVar("F", bound=Callable[..., Any])


class TimeReporter:
    """Collects checkpoints for one unit of work and reports them once.

    Used as a context manager, the report is emitted when the block exits,
    including exits by exception, so failed units still leave a timing line.
    A reporter that is never finished emits nothing. ``level`` and ``options``
    override the emitter's settings for this reporter only.

    Example:
        with TimeReporter("Chunk Processor") as reporter:
            chunk = recv()
            reporter.mark("recv")
            send(pack(chunk))
            reporter.mark("send")
    """

    def __init__(
        self,
        name: str,
        emitter: Optional[ReportEmitter] = None,
        clock: Optional[Clock] = None,
        level: Optional[Union[int, str]] = None,
        options: Optional[FormatOptions] = None,
    ) -> None:
        self.recorder = CheckpointRecorder(name, clock=clock)
        self._emitter = emitter
        self.level = level_from_name(level) if isinstance(level, str) else level
        self.options = options
        self._lock = threading.Lock()
        self._record: Optional[ReportRecord] = None

    @property
    def name(self) -> str:
        return self.recorder.name

    @property
    def finished(self) -> bool:
        return self._record is not None

    def mark(self, label: str) -> None:
        self.recorder.mark(label)

    def stage(self, label: str) -> ContextManager[None]:
        return self.recorder.stage(label)

    def pause(self) -> None:
        self.recorder.pause()

    def resume(self) -> None:
        self.recorder.resume()

    def paused(self) -> ContextManager[None]:
        return self.recorder.paused()

    def finalize(self) -> ReportRecord:
        return self.recorder.finalize()

    def finish(self) -> ReportRecord:
        """Close the recorder and emit its report; only the first call emits."""
        with self._lock:
            if self._record is not None:
                return self._record
            record = self._record = self.recorder.close()
        emitter = self._emitter or get_default_emitter()
        emitter.emit(record, level=self.level, options=self.options)
        return record

    def __enter__(self) -> "TimeReporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.finish()
        return False

    async def __aenter__(self) -> "TimeReporter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.finish()
        return False

    def __repr__(self) -> str:
        state = "finished" if self.finished else "open"
        return f"TimeReporter(name={self.name!r}, checkpoints={len(self.recorder)}, {state})"


def timed_unit(name: str, emitter: Optional[ReportEmitter] = None) -> Callable[[F], F]:
    """Run each call of the decorated function inside its own reporter.

    The reporter is passed as the ``reporter`` keyword argument. Coroutine
    functions are supported.
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                async with TimeReporter(name, emitter=emitter) as reporter:
                    return await func(*args, reporter=reporter, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with TimeReporter(name, emitter=emitter) as reporter:
                return func(*args, reporter=reporter, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
