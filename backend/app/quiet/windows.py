from __future__ import annotations

import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from app.jobs.ingest.types import NormalizedEvent

DEFAULT_THRESHOLD_MINUTES = 30

ONE_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class QuietWindow:
    start: datetime
    end: datetime
    duration_minutes: int

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "QuietWindow":
        # floor: 44m59s is 44 minutes
        return cls(start=start, end=end, duration_minutes=(end - start) // ONE_MINUTE)


def validate_inputs(*, now: datetime, threshold_minutes) -> timedelta:
    """Reject caller mistakes up front. Returns the threshold as a timedelta."""
    if isinstance(threshold_minutes, bool) or not isinstance(threshold_minutes, numbers.Real):
        raise ValueError(f"threshold_minutes must be a number, got {threshold_minutes!r}")
    if threshold_minutes <= 0:
        raise ValueError(f"threshold_minutes must be > 0, got {threshold_minutes!r}")
    if not isinstance(now, datetime):
        raise ValueError(f"now must be a datetime, got {type(now).__name__}")
    if now.tzinfo is not None:
        raise ValueError("now must be a naive local datetime")
    return timedelta(minutes=threshold_minutes)


def derive_quiet_windows(
    timeline: Sequence[NormalizedEvent],
    *,
    now: datetime,
    threshold_minutes: float = DEFAULT_THRESHOLD_MINUTES,
) -> list[QuietWindow]:
    """
    Gaps of at least threshold_minutes between consecutive events, plus the gap
    from now to the first event.

    timeline must be ascending with every event at or after now (build_timeline
    with not_before=now). Comparison is >=, so an exact-threshold gap qualifies.
    """
    threshold = validate_inputs(now=now, threshold_minutes=threshold_minutes)

    windows: list[QuietWindow] = []
    if not timeline:
        return windows

    first = timeline[0].timestamp
    if first - now >= threshold:
        windows.append(QuietWindow.between(now, first))

    for prev, nxt in zip(timeline, timeline[1:]):
        if nxt.timestamp - prev.timestamp >= threshold:
            windows.append(QuietWindow.between(prev.timestamp, nxt.timestamp))

    return windows
