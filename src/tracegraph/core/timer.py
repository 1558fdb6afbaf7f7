"""Wall-clock timing of a single execution span."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class TimerHandle:
    started_at: datetime
    perf_start: float


@dataclass(frozen=True)
class Timing:
    start_time: datetime
    end_time: datetime
    duration: float
    elapsed_time: str


class ExecutionTimer:
    """Bounds a span with UTC timestamps and a monotonic duration in ms."""

    def start(self) -> TimerHandle:
        return TimerHandle(started_at=datetime.now(UTC), perf_start=time.perf_counter())

    def stop(self, handle: TimerHandle) -> Timing:
        duration = (time.perf_counter() - handle.perf_start) * 1000.0
        return Timing(
            start_time=handle.started_at,
            end_time=datetime.now(UTC),
            duration=duration,
            elapsed_time=format_elapsed(duration),
        )


def format_elapsed(duration_ms: float) -> str:
    """Render milliseconds as ``850.0ms``, ``1.2s`` or ``2m 3.4s``."""
    if duration_ms < 1000:
        return f"{duration_ms:.1f}ms"
    seconds = duration_ms / 1000.0
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, remainder = divmod(seconds, 60)
    return f"{int(minutes)}m {remainder:.1f}s"
