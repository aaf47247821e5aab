from datetime import datetime
from functools import lru_cache

from fastapi import Depends

from app.core.config import AppConfig, load_config
from app.jobs.ingest.registry import SOURCES
from app.jobs.ingest.sources.base import BaseSource


@lru_cache
def get_config() -> AppConfig:
    return load_config()


def get_source(cfg: AppConfig = Depends(get_config)) -> BaseSource:
    if cfg.source not in SOURCES:
        raise RuntimeError(f"QUIET_SOURCE {cfg.source!r} unknown; expected one of {sorted(SOURCES)}")
    return SOURCES[cfg.source](cfg)


def get_now(cfg: AppConfig = Depends(get_config)) -> datetime:
    # sampled once per request, local wall-clock, naive
    return datetime.now(cfg.tz).replace(tzinfo=None)
