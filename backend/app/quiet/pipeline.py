from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from app.jobs.ingest.normalize import NormalizeStats, normalize_batch
from app.jobs.ingest.types import NormalizedEvent, SourceBatch
from app.quiet.timeline import Timeline, build_timeline
from app.quiet.windows import DEFAULT_THRESHOLD_MINUTES, QuietWindow, derive_quiet_windows, validate_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuietSlotsResult:
    now: datetime
    threshold_minutes: float
    timeline: Timeline
    windows: list[QuietWindow]
    stats: NormalizeStats


@dataclass(frozen=True)
class FlightListResult:
    timeline: Timeline
    stats: NormalizeStats


def _normalize_batches(
    batches: Iterable[SourceBatch],
    *,
    reference_date: Optional[date],
) -> tuple[list[list[NormalizedEvent]], NormalizeStats]:
    # one cursor per batch: roll-over never leaks from departures into arrivals
    normalized: list[list[NormalizedEvent]] = []
    stats = NormalizeStats()
    for batch in batches:
        events, batch_stats = normalize_batch(batch.records, reference_date=reference_date)
        logger.debug(
            "Batch %s: records=%d accepted=%d rolled_over=%d rejected=%s",
            batch.name,
            len(batch.records),
            batch_stats.accepted,
            batch_stats.rolled_over,
            batch_stats.rejected,
        )
        normalized.append(events)
        stats = stats.merge(batch_stats)
    return normalized, stats


def build_flight_list(
    batches: Iterable[SourceBatch],
    *,
    reference_date: Optional[date],
) -> FlightListResult:
    """All valid flights, past ones included, in chronological order."""
    normalized, stats = _normalize_batches(batches, reference_date=reference_date)
    return FlightListResult(timeline=build_timeline(normalized), stats=stats)


def compute_quiet_slots(
    batches: Iterable[SourceBatch],
    *,
    now: datetime,
    threshold_minutes: float = DEFAULT_THRESHOLD_MINUTES,
    reference_date: Optional[date] = None,
) -> QuietSlotsResult:
    """
    Normalize each batch, keep future events (>= now) and derive quiet windows.

    reference_date dates the time-only records; it defaults to now's date.
    Raises ValueError for a bad threshold or now before anything is computed.
    """
    validate_inputs(now=now, threshold_minutes=threshold_minutes)
    if reference_date is None:
        reference_date = now.date()

    normalized, stats = _normalize_batches(batches, reference_date=reference_date)
    timeline = build_timeline(normalized, not_before=now)
    windows = derive_quiet_windows(timeline, now=now, threshold_minutes=threshold_minutes)

    logger.info(
        "Quiet slots computed now=%s threshold=%s accepted=%d rejected=%d upcoming=%d windows=%d",
        now.isoformat(timespec="minutes"),
        threshold_minutes,
        stats.accepted,
        stats.total_rejected,
        len(timeline),
        len(windows),
    )

    return QuietSlotsResult(
        now=now,
        threshold_minutes=threshold_minutes,
        timeline=timeline,
        windows=windows,
        stats=stats,
    )
