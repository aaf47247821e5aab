import argparse
import asyncio
import json
import logging
from datetime import date, datetime

from app.core.config import load_config
from app.core.logging import configure_logging_if_needed
from app.jobs.ingest.registry import SOURCES
from app.jobs.ingest.sources.base import SourceError
from app.jobs.ingest.sources.file import FileSource
from app.quiet.formatting import assemble_quiet_slots
from app.quiet.pipeline import compute_quiet_slots

logger = logging.getLogger(__name__)


def main(argv=None):
    p = argparse.ArgumentParser(description="Compute quiet slots between scheduled flights")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--source", choices=SOURCES.keys())
    src.add_argument("--input", help="JSON file with volsDepart/volsArrivee or vols")

    p.add_argument("--now", help="YYYY-MM-DDTHH:MM (default: current local time)")
    p.add_argument("--threshold-minutes", type=int, help="Minimum gap (default: QUIET_THRESHOLD_MINUTES)")
    p.add_argument("--reference-date", help="YYYY-MM-DD for time-only records (default: date of --now)")
    p.add_argument("--include-flights", action="store_true")

    args = p.parse_args(argv)

    cfg = load_config()
    configure_logging_if_needed(cfg.log_level)

    try:
        now = datetime.fromisoformat(args.now) if args.now else datetime.now(cfg.tz).replace(tzinfo=None)
        reference_date = date.fromisoformat(args.reference_date) if args.reference_date else None
    except ValueError as e:
        p.error(str(e))
    if now.tzinfo is not None:
        now = now.astimezone(cfg.tz).replace(tzinfo=None)

    threshold = args.threshold_minutes if args.threshold_minutes is not None else cfg.threshold_minutes

    source = FileSource(cfg, args.input) if args.input else SOURCES[args.source](cfg)
    try:
        batches = asyncio.run(source.fetch_batches())
    except SourceError as e:
        logger.error("%s", e)
        raise SystemExit(1)

    try:
        result = compute_quiet_slots(batches, now=now, threshold_minutes=threshold, reference_date=reference_date)
    except ValueError as e:
        p.error(str(e))

    out = assemble_quiet_slots(result.windows, events=result.timeline if args.include_flights else None)
    out["rejected"] = result.stats.rejected
    print(json.dumps(out, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
