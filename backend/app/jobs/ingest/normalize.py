"""
Raw record -> NormalizedEvent.

Roll-over inference assumes each batch is in source display order (the order the
airport board lists flights). A batch that was re-ordered or merged with another
kind before reaching this module will get wrong dates after midnight, so sources
must hand over one batch per page/list and never pre-merge them.
"""
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from app.jobs.ingest.types import NormalizedEvent, RawEventRecord, RecordState
from app.jobs.ingest.utils.time import clean_field, parse_hhmm, parse_service_date, roll_if_earlier

logger = logging.getLogger(__name__)

CANCELLATION_MARKERS = ("annulé", "annule", "cancelled", "canceled")


@dataclass
class NormalizeStats:
    accepted: int = 0
    rolled_over: int = 0
    rejected: dict[str, int] = field(default_factory=dict)

    @property
    def total_rejected(self) -> int:
        return sum(self.rejected.values())

    def reject(self, state: RecordState) -> None:
        self.rejected[state.value] = self.rejected.get(state.value, 0) + 1

    def merge(self, other: "NormalizeStats") -> "NormalizeStats":
        merged = dict(self.rejected)
        for k, v in other.rejected.items():
            merged[k] = merged.get(k, 0) + v
        return NormalizeStats(
            accepted=self.accepted + other.accepted,
            rolled_over=self.rolled_over + other.rolled_over,
            rejected=merged,
        )


def is_cancelled(status: Optional[str]) -> bool:
    text = unicodedata.normalize("NFC", clean_field(status)).casefold()
    return any(marker in text for marker in CANCELLATION_MARKERS)


def classify_record(raw: RawEventRecord, *, reference_date: Optional[date]) -> RecordState:
    """Resolve which variant of raw record this is. Checks run time -> date -> status."""
    try:
        t = parse_hhmm(raw.scheduled_time)
    except ValueError:
        return RecordState.MALFORMED_TIME
    if t is None:
        return RecordState.MISSING_TIME

    try:
        d = parse_service_date(raw.scheduled_date)
    except ValueError:
        return RecordState.MALFORMED_DATE
    if d is None and reference_date is None:
        return RecordState.MISSING_DATE

    if is_cancelled(raw.status):
        return RecordState.CANCELLED

    return RecordState.WELL_FORMED


def normalize_record(
    raw: RawEventRecord,
    *,
    reference_date: Optional[date],
    cursor: Optional[datetime],
) -> tuple[Optional[NormalizedEvent], RecordState, bool]:
    """
    Returns (event, state, rolled_over). event is None unless state is WELL_FORMED.

    Records carrying their own date are combined as-is and never rolled over, so
    re-normalizing an already dated event reproduces its timestamp.
    """
    state = classify_record(raw, reference_date=reference_date)
    if state is not RecordState.WELL_FORMED:
        return None, state, False

    t = parse_hhmm(raw.scheduled_time)
    explicit = parse_service_date(raw.scheduled_date)

    rolled = False
    if explicit is not None:
        ts = datetime.combine(explicit, t)
    else:
        naive = datetime.combine(reference_date, t)
        ts = roll_if_earlier(cursor, naive)
        rolled = ts != naive

    event = NormalizedEvent(
        kind=raw.kind,
        timestamp=ts,
        status=clean_field(raw.status) or None,
        carrier=raw.carrier,
        flight_number=raw.flight_number,
        destination=raw.destination,
        origin=raw.origin,
    )
    return event, state, rolled


def normalize_batch(
    records: Iterable[RawEventRecord],
    *,
    reference_date: Optional[date],
) -> tuple[list[NormalizedEvent], NormalizeStats]:
    """
    Normalize one display-ordered batch, threading the roll-over cursor.
    Rejected records are dropped and counted, never raised.
    """
    events: list[NormalizedEvent] = []
    stats = NormalizeStats()
    cursor: Optional[datetime] = None

    for idx, raw in enumerate(records, start=1):
        event, state, rolled = normalize_record(raw, reference_date=reference_date, cursor=cursor)
        if event is None:
            stats.reject(state)
            logger.debug(
                "Record %d skipped: %s (flight=%r time=%r date=%r status=%r)",
                idx,
                state.value,
                raw.flight_number,
                raw.scheduled_time,
                raw.scheduled_date,
                raw.status,
            )
            continue

        if rolled:
            stats.rolled_over += 1
            logger.debug("Record %d rolled over to %s", idx, event.timestamp.date().isoformat())

        events.append(event)
        stats.accepted += 1
        cursor = event.timestamp

    return events, stats
