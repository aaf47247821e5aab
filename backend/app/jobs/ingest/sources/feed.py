import logging

import httpx

from app.core.config import AppConfig
from app.jobs.ingest.sources.base import BaseSource, SourceError
from app.jobs.ingest.types import SourceBatch

from .http import get_with_retry, make_client
from .payload import payload_to_batches

logger = logging.getLogger(__name__)


class FeedSource(BaseSource):
    """JSON flights feed served by the board scraper (GET /flights)."""

    def __init__(self, cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg
        self.transport = transport

    async def fetch_batches(self) -> list[SourceBatch]:
        logger.info("Fetching flights feed %s", self.cfg.feed_url)
        try:
            async with make_client(self.cfg, transport=self.transport) as client:
                r = await get_with_retry(self.cfg, client, self.cfg.feed_url)
            batches = payload_to_batches(r.json())
        except (httpx.HTTPError, ValueError) as e:
            raise SourceError(f"flights feed unavailable: {e!r}") from e

        logger.info(
            "Feed returned %s",
            ", ".join(f"{b.name}={len(b.records)}" for b in batches),
        )
        return batches
