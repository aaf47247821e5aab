import os
from dataclasses import dataclass

import pytz

DEFAULT_DEPARTURES_URL = "https://www.nantes.aeroport.fr/fr/trouvez-votre-destination/vols-au-depart"
DEFAULT_ARRIVALS_URL = "https://www.nantes.aeroport.fr/fr/trouvez-votre-destination/vols-en-arrivee"


@dataclass(frozen=True)
class AppConfig:
    source: str
    feed_url: str
    departures_url: str
    arrivals_url: str
    input_file: str

    timezone: str
    threshold_minutes: int

    connect_timeout: float
    read_timeout: float
    write_timeout: float
    pool_timeout: float

    retries: int
    backoff_base: float

    log_level: str

    @property
    def tz(self):
        return pytz.timezone(self.timezone)


def load_config() -> AppConfig:
    cfg = AppConfig(
        source=os.getenv("QUIET_SOURCE", "feed"),
        feed_url=os.getenv("QUIET_FEED_URL", "http://localhost:3000/flights"),
        departures_url=os.getenv("QUIET_DEPARTURES_URL", DEFAULT_DEPARTURES_URL),
        arrivals_url=os.getenv("QUIET_ARRIVALS_URL", DEFAULT_ARRIVALS_URL),
        input_file=os.getenv("QUIET_INPUT_FILE", ""),
        timezone=os.getenv("QUIET_TIMEZONE", "Europe/Paris"),
        threshold_minutes=int(os.getenv("QUIET_THRESHOLD_MINUTES", "30")),
        connect_timeout=float(os.getenv("QUIET_CONNECT_TIMEOUT_SECONDS", "10")),
        read_timeout=float(os.getenv("QUIET_READ_TIMEOUT_SECONDS", "30")),
        write_timeout=float(os.getenv("QUIET_WRITE_TIMEOUT_SECONDS", "10")),
        pool_timeout=float(os.getenv("QUIET_POOL_TIMEOUT_SECONDS", "10")),
        retries=int(os.getenv("QUIET_RETRIES", "3")),
        backoff_base=float(os.getenv("QUIET_BACKOFF_BASE_SECONDS", "1.0")),
        log_level=os.getenv("QUIET_LOG_LEVEL", "INFO"),
    )

    if cfg.threshold_minutes <= 0:
        raise RuntimeError("QUIET_THRESHOLD_MINUTES must be a positive number of minutes")
    if cfg.retries < 1:
        raise RuntimeError("QUIET_RETRIES must be >= 1")
    try:
        pytz.timezone(cfg.timezone)
    except pytz.UnknownTimeZoneError:
        raise RuntimeError(f"QUIET_TIMEZONE {cfg.timezone!r} is not a known timezone")

    return cfg
