from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class EventKind(str, Enum):
    DEPARTURE = "departure"
    ARRIVAL = "arrival"

    @classmethod
    def parse(cls, value) -> Optional["EventKind"]:
        """Map an upstream label ("Départ", "Arrivée", "Departure", ...) to a kind."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        text = unicodedata.normalize("NFKD", str(value)).encode("ascii", "ignore").decode()
        text = text.strip().casefold()
        if text.startswith("depart"):
            return cls.DEPARTURE
        if text.startswith("arriv"):
            return cls.ARRIVAL
        return None


class RecordState(str, Enum):
    """Outcome of classifying one raw record; only WELL_FORMED becomes an event."""

    WELL_FORMED = "well_formed"
    MISSING_TIME = "missing_time"
    MALFORMED_TIME = "malformed_time"
    MISSING_DATE = "missing_date"
    MALFORMED_DATE = "malformed_date"
    CANCELLED = "cancelled"


PASSTHROUGH_FIELDS = ("carrier", "flight_number", "destination", "origin")

# upstream (scraper) key -> our field
_FEED_KEYS = {
    "heure": "scheduled_time",
    "date": "scheduled_date",
    "statut": "status",
    "compagnie": "carrier",
    "numeroVol": "flight_number",
    "provenance": "origin",
    "destination": "destination",
}


@dataclass(frozen=True)
class RawEventRecord:
    kind: EventKind
    scheduled_time: Optional[str] = None   # expected "HH:MM", untrusted
    scheduled_date: Optional[str] = None   # expected "YYYY-MM-DD", optional
    status: Optional[str] = None

    carrier: Optional[str] = None
    flight_number: Optional[str] = None
    destination: Optional[str] = None
    origin: Optional[str] = None

    @classmethod
    def from_feed(cls, item: dict, kind: Optional[EventKind] = None) -> Optional["RawEventRecord"]:
        """
        Build a record from an upstream dict. French scraper keys and our own
        English keys are both accepted. Returns None when no kind can be resolved.
        """
        resolved = EventKind.parse(item.get("type") or item.get("kind")) or kind
        if resolved is None:
            return None

        values: dict = {}
        for src, dst in _FEED_KEYS.items():
            if item.get(src) is not None:
                values[dst] = _as_text(item[src])
        for name in ("scheduled_time", "scheduled_date", "status", *PASSTHROUGH_FIELDS):
            if item.get(name) is not None:
                values[name] = _as_text(item[name])

        return cls(kind=resolved, **values)


@dataclass(frozen=True)
class NormalizedEvent:
    kind: EventKind
    timestamp: datetime                    # naive, local zone
    status: Optional[str] = None

    carrier: Optional[str] = None
    flight_number: Optional[str] = None
    destination: Optional[str] = None
    origin: Optional[str] = None

    def passthrough(self) -> dict[str, Optional[str]]:
        return {name: getattr(self, name) for name in PASSTHROUGH_FIELDS}

    def to_raw(self) -> RawEventRecord:
        """Dated raw form of this event; normalizing it again gives the same timestamp."""
        return RawEventRecord(
            kind=self.kind,
            scheduled_time=self.timestamp.strftime("%H:%M"),
            scheduled_date=self.timestamp.date().isoformat(),
            status=self.status,
            **self.passthrough(),
        )


@dataclass(frozen=True)
class SourceBatch:
    """Records sharing one display ordering (one board page, one feed list)."""

    name: str
    records: list[RawEventRecord] = field(default_factory=list)


def _as_text(value) -> str:
    return value if isinstance(value, str) else str(value)
