from app.jobs.ingest.sources.airport import AirportBoardSource
from app.jobs.ingest.sources.feed import FeedSource
from app.jobs.ingest.sources.file import FileSource

SOURCES = {
    "airport": AirportBoardSource,
    "feed": FeedSource,
    "file": FileSource,
}
