from typing import Optional
from fastapi import APIRouter, HTTPException
from skyreserve.services.flight_tracker import get_flight_by_number, get_flights_in_region

router = APIRouter(tags=["tracking"])


@router.get("/tracking/flight/{flight_number}")
def track_flight(flight_number: str):
    flight = get_flight_by_number(flight_number)
    if not flight:
        raise HTTPException(status_code=404, detail="Flight not found")
    return flight


@router.get("/tracking/region")
def flights_in_region(
    lamin: Optional[float] = None,
    lomin: Optional[float] = None,
    lamax: Optional[float] = None,
    lomax: Optional[float] = None,
):
    if None in (lamin, lomin, lamax, lomax):
        raise HTTPException(status_code=400, detail="Missing region bounds")
    return get_flights_in_region(lamin, lomin, lamax, lomax)
