"""
Nantes airport flight boards (departures page, arrivals page).

Each page lists flights in display order with a time of day only, so each page
becomes its own batch and dating is left to the normalizer's roll-over rule.
"""
import asyncio
import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from app.core.config import AppConfig
from app.jobs.ingest.sources.base import BaseSource, SourceError
from app.jobs.ingest.types import EventKind, RawEventRecord, SourceBatch

from .http import get_with_retry, make_client

logger = logging.getLogger(__name__)

CARD_SELECTOR = ".card-flight__top"
LABEL_SELECTOR = ".card-flight__label"
LOGO_SELECTOR = ".card-flight__data--logo img"

TIME_LABELS = {
    EventKind.DEPARTURE: "Heure de départ programmée",
    EventKind.ARRIVAL: "Heure d'arrivée programmée",
}
HOME_AIRPORT = "Nantes"


def _labelled_text(card, label: str) -> Optional[str]:
    for el in card.select(LABEL_SELECTOR):
        if label in el.get_text():
            value = el.find_next_sibling()
            if value is None:
                return None
            return value.get_text().strip() or None
    return None


def parse_board(html: str, kind: EventKind) -> list[RawEventRecord]:
    """Extract one record per flight card, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    records: list[RawEventRecord] = []

    for card in soup.select(CARD_SELECTOR):
        logo = card.select_one(LOGO_SELECTOR)
        carrier = None
        if logo is not None:
            carrier = (logo.get("alt") or "").strip() or None

        if kind is EventKind.DEPARTURE:
            destination = _labelled_text(card, "Destination")
            origin = HOME_AIRPORT
        else:
            destination = HOME_AIRPORT
            origin = _labelled_text(card, "Provenance")

        records.append(
            RawEventRecord(
                kind=kind,
                scheduled_time=_labelled_text(card, TIME_LABELS[kind]),
                status=_labelled_text(card, "Statut de vol"),
                carrier=carrier,
                flight_number=_labelled_text(card, "N° vol"),
                destination=destination,
                origin=origin,
            )
        )

    return records


class AirportBoardSource(BaseSource):
    def __init__(self, cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg
        self.transport = transport

    async def _fetch_board(self, client: httpx.AsyncClient, url: str, kind: EventKind) -> SourceBatch:
        r = await get_with_retry(self.cfg, client, url)
        records = parse_board(r.text, kind)
        if not records:
            logger.warning("No flight cards found on %s (page may need client-side rendering)", url)
        name = "departures" if kind is EventKind.DEPARTURE else "arrivals"
        logger.info("Board %s: %d cards", name, len(records))
        return SourceBatch(name=name, records=records)

    async def fetch_batches(self) -> list[SourceBatch]:
        async with make_client(self.cfg, transport=self.transport) as client:
            results = await asyncio.gather(
                self._fetch_board(client, self.cfg.departures_url, EventKind.DEPARTURE),
                self._fetch_board(client, self.cfg.arrivals_url, EventKind.ARRIVAL),
                return_exceptions=True,
            )

        for res in results:
            if isinstance(res, httpx.HTTPError):
                raise SourceError(f"airport board unavailable: {res!r}") from res
            if isinstance(res, BaseException):
                raise res
        return list(results)
