from abc import ABC, abstractmethod

from app.jobs.ingest.types import SourceBatch


class SourceError(RuntimeError):
    """Upstream could not be fetched or its payload was unusable."""


class BaseSource(ABC):
    @abstractmethod
    async def fetch_batches(self) -> list[SourceBatch]:
        """
        Fetch raw records. One SourceBatch per display-ordered list (e.g. the
        departures board and the arrivals board); never merge lists here.
        Raise SourceError when upstream is unavailable.
        """
        raise NotImplementedError
