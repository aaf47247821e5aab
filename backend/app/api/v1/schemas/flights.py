from pydantic import BaseModel, Field
from typing import Literal, Optional


class Flight(BaseModel):
    kind: Literal["departure", "arrival"]
    timestamp: str = Field(..., description="Local ISO datetime, no offset")
    status: Optional[str] = None

    carrier: Optional[str] = None
    flight_number: Optional[str] = None
    destination: Optional[str] = None
    origin: Optional[str] = None


class QuietSlot(BaseModel):
    debut: str = Field(..., description="YYYY-MM-DD HH:MM, local time")
    fin: str = Field(..., description="YYYY-MM-DD HH:MM, local time")
    duree: int = Field(..., description="Whole minutes, floored")


class QuietSlotsResponse(BaseModel):
    quietSlots: list[QuietSlot]
    flights: Optional[list[Flight]] = None


class FlightsResponse(BaseModel):
    flights: list[Flight]
    rejected: dict[str, int]
