import json
import logging
from pathlib import Path

from app.core.config import AppConfig
from app.jobs.ingest.sources.base import BaseSource, SourceError
from app.jobs.ingest.types import SourceBatch

from .payload import payload_to_batches

logger = logging.getLogger(__name__)


class FileSource(BaseSource):
    """Flights payload saved to disk, same shapes as the feed."""

    def __init__(self, cfg: AppConfig, path: str | Path | None = None):
        self.path = Path(path or cfg.input_file)

    async def fetch_batches(self) -> list[SourceBatch]:
        if not self.path.is_file():
            raise SourceError(f"flights file not found: {self.path}")
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            batches = payload_to_batches(payload)
        except ValueError as e:
            raise SourceError(f"flights file {self.path} unreadable: {e}") from e

        logger.info("Loaded %d batches from %s", len(batches), self.path)
        return batches
