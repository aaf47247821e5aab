import logging
from typing import Optional

from app.jobs.ingest.types import EventKind, RawEventRecord, SourceBatch

logger = logging.getLogger(__name__)

# key in the scraper's /flights payload -> (batch name, kind)
FEED_LISTS = {
    "volsDepart": ("departures", EventKind.DEPARTURE),
    "volsArrivee": ("arrivals", EventKind.ARRIVAL),
}


def as_list(x):
    if x is None:
        return []
    return x if isinstance(x, list) else [x]


def items_to_records(items: list, kind: Optional[EventKind] = None) -> list[RawEventRecord]:
    records: list[RawEventRecord] = []
    for idx, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            logger.debug("Item %d skipped: not an object (%r)", idx, item)
            continue
        rec = RawEventRecord.from_feed(item, kind=kind)
        if rec is None:
            logger.debug("Item %d skipped: no kind in %r", idx, item)
            continue
        records.append(rec)
    return records


def payload_to_batches(payload) -> list[SourceBatch]:
    """
    Accepted shapes:
      {"volsDepart": [...], "volsArrivee": [...]}  one display-ordered batch per board
      {"vols": [...]}                               one list of already dated flights
      [...]                                         same as {"vols": [...]}
    """
    if isinstance(payload, list):
        return [SourceBatch(name="vols", records=items_to_records(payload))]

    if not isinstance(payload, dict):
        raise ValueError(f"Unsupported flights payload: {type(payload).__name__}")

    batches: list[SourceBatch] = []
    for key, (name, kind) in FEED_LISTS.items():
        if key in payload:
            batches.append(SourceBatch(name=name, records=items_to_records(as_list(payload[key]), kind)))

    if "vols" in payload:
        batches.append(SourceBatch(name="vols", records=items_to_records(as_list(payload["vols"]))))

    if not batches:
        raise ValueError(f"Flights payload has none of volsDepart/volsArrivee/vols (keys={sorted(payload)})")
    return batches
