from typing import Optional

import pytest

from app.core.config import AppConfig
from app.jobs.ingest.sources.base import BaseSource, SourceError
from app.jobs.ingest.types import EventKind, RawEventRecord, SourceBatch


def raw(
    time: Optional[str],
    date: Optional[str] = None,
    status: Optional[str] = "A l'heure",
    kind: EventKind = EventKind.DEPARTURE,
    flight: Optional[str] = None,
) -> RawEventRecord:
    return RawEventRecord(
        kind=kind,
        scheduled_time=time,
        scheduled_date=date,
        status=status,
        flight_number=flight,
    )


class StaticSource(BaseSource):
    def __init__(self, batches: list[SourceBatch]):
        self.batches = batches

    async def fetch_batches(self) -> list[SourceBatch]:
        return self.batches


class FailingSource(BaseSource):
    async def fetch_batches(self) -> list[SourceBatch]:
        raise SourceError("upstream down")


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig(
        source="feed",
        feed_url="http://upstream.test/flights",
        departures_url="http://airport.test/departures",
        arrivals_url="http://airport.test/arrivals",
        input_file="",
        timezone="Europe/Paris",
        threshold_minutes=30,
        connect_timeout=1.0,
        read_timeout=1.0,
        write_timeout=1.0,
        pool_timeout=1.0,
        retries=2,
        backoff_base=0.0,
        log_level="DEBUG",
    )
