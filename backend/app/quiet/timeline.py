from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from app.jobs.ingest.types import NormalizedEvent

Timeline = tuple[NormalizedEvent, ...]


def build_timeline(
    batches: Iterable[Iterable[NormalizedEvent]],
    *,
    not_before: Optional[datetime] = None,
) -> Timeline:
    """
    Merge normalized batches into one timeline ordered by timestamp.

    The sort is stable: events sharing a timestamp keep submission order (batch
    order, then position within the batch). Simultaneous flights are all kept.
    With not_before, only events at or after that instant survive.
    """
    merged = [ev for batch in batches for ev in batch]
    if not_before is not None:
        merged = [ev for ev in merged if ev.timestamp >= not_before]
    return tuple(sorted(merged, key=lambda ev: ev.timestamp))
