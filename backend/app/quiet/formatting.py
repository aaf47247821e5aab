from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from app.jobs.ingest.types import PASSTHROUGH_FIELDS, NormalizedEvent
from app.quiet.windows import QuietWindow

LOCAL_FORMAT = "%Y-%m-%d %H:%M"


def format_local(dt: datetime) -> str:
    """Local wall-clock time, minute precision, no offset: "2024-05-01 09:25"."""
    return dt.strftime(LOCAL_FORMAT)


def window_to_wire(w: QuietWindow) -> dict:
    return {
        "debut": format_local(w.start),
        "fin": format_local(w.end),
        "duree": w.duration_minutes,
    }


def event_to_wire(ev: NormalizedEvent, fields: Optional[Iterable[str]] = None) -> dict:
    """
    Flight as sent to clients. fields restricts the descriptive passthrough keys;
    unknown names are ignored.
    """
    if fields is None:
        wanted = PASSTHROUGH_FIELDS
    else:
        requested = set(fields)
        wanted = tuple(f for f in PASSTHROUGH_FIELDS if f in requested)

    out = {
        "kind": ev.kind.value,
        "timestamp": ev.timestamp.isoformat(timespec="seconds"),
        "status": ev.status,
    }
    for name in wanted:
        out[name] = getattr(ev, name)
    return out


def assemble_quiet_slots(
    windows: Sequence[QuietWindow],
    events: Optional[Sequence[NormalizedEvent]] = None,
    fields: Optional[Iterable[str]] = None,
) -> dict:
    out: dict = {"quietSlots": [window_to_wire(w) for w in windows]}
    if events is not None:
        fields = None if fields is None else list(fields)
        out["flights"] = [event_to_wire(ev, fields) for ev in events]
    return out
