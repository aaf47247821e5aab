from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.schemas.flights import FlightsResponse, QuietSlotsResponse
from app.core.config import AppConfig
from app.core.deps import get_config, get_now, get_source
from app.jobs.ingest.sources.base import BaseSource, SourceError
from app.jobs.ingest.types import SourceBatch
from app.quiet.formatting import assemble_quiet_slots, event_to_wire
from app.quiet.pipeline import build_flight_list, compute_quiet_slots

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["flights"])

FETCH_ERROR = "Erreur lors de la récupération des vols."
COMPUTE_ERROR = "Erreur lors du calcul des créneaux."


def parse_now(value: Optional[str], cfg: AppConfig, default: datetime) -> datetime:
    if not value:
        return default
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="now must be an ISO datetime (YYYY-MM-DDTHH:MM)")
    if dt.tzinfo is not None:
        dt = dt.astimezone(cfg.tz).replace(tzinfo=None)
    return dt


def parse_reference_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="reference_date must be YYYY-MM-DD")


async def fetch_batches(source: BaseSource) -> list[SourceBatch]:
    try:
        return await source.fetch_batches()
    except SourceError as e:
        logger.error("Upstream fetch failed: %s", e)
        raise HTTPException(status_code=502, detail=FETCH_ERROR)


@router.get("/flights", response_model=FlightsResponse, response_model_exclude_unset=True)
async def get_flights(
    fields: Optional[list[str]] = Query(None, description="Descriptive fields to include (default all)"),
    reference_date: Optional[str] = Query(None, description="YYYY-MM-DD for time-only records"),
    source: BaseSource = Depends(get_source),
    now: datetime = Depends(get_now),
):
    ref = parse_reference_date(reference_date) or now.date()
    batches = await fetch_batches(source)

    result = build_flight_list(batches, reference_date=ref)
    return {
        "flights": [event_to_wire(ev, fields) for ev in result.timeline],
        "rejected": result.stats.rejected,
    }


@router.get("/quiet-slots", response_model=QuietSlotsResponse, response_model_exclude_unset=True)
async def get_quiet_slots(
    threshold_minutes: Optional[int] = Query(None, ge=1, le=24 * 60),
    now_override: Optional[str] = Query(None, alias="now", description="ISO datetime; defaults to the current local time"),
    reference_date: Optional[str] = Query(None, description="YYYY-MM-DD for time-only records"),
    include_flights: bool = Query(False),
    fields: Optional[list[str]] = Query(None),
    cfg: AppConfig = Depends(get_config),
    source: BaseSource = Depends(get_source),
    now: datetime = Depends(get_now),
):
    now = parse_now(now_override, cfg, now)
    ref = parse_reference_date(reference_date)
    threshold = threshold_minutes or cfg.threshold_minutes

    batches = await fetch_batches(source)

    try:
        result = compute_quiet_slots(batches, now=now, threshold_minutes=threshold, reference_date=ref)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Quiet slots computation failed")
        raise HTTPException(status_code=500, detail=COMPUTE_ERROR)

    return assemble_quiet_slots(
        result.windows,
        events=result.timeline if include_flights else None,
        fields=fields,
    )
