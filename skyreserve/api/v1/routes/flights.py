import logging
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from skyreserve.db.session import get_db
from skyreserve.models.flight import Flight
from skyreserve.schemas.flight import FlightIn
from skyreserve.services.flight_api import get_realtime_flights
from skyreserve.services.flight_generator import extract_airport_code, generate_flights

logger = logging.getLogger(__name__)

router = APIRouter(tags=["flights"])


def _flight_out(f: Flight) -> dict:
    return {
        "id": f.id,
        "airline": f.airline,
        "flightNumber": f.flight_number,
        "from": f.from_label,
        "to": f.to_label,
        "departTime": f.depart_time,
        "arriveTime": f.arrive_time,
        "duration": f.duration,
        "price": float(f.price),
        "travelType": f.travel_type,
    }


def _find_flights(from_code: str, to_code: str, travel_type: str, date: str) -> list[dict]:
    """Real-time source first; mock inventory when it has nothing."""
    flights = get_realtime_flights(from_code, to_code, date)
    if flights:
        return flights
    return generate_flights(from_code, to_code, travel_type, date)


@router.get("/flights")
def search_flights(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    date: Optional[str] = None,
    returnDate: Optional[str] = None,
    travelType: Optional[str] = None,
    tripType: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Search with from/to/date/travelType; without them, list stored flights."""
    if not (from_ and to and date and travelType):
        return [_flight_out(f) for f in db.query(Flight).order_by(Flight.created_at.desc()).all()]

    from_code = extract_airport_code(from_)
    to_code = extract_airport_code(to)
    logger.info("Flight search %s -> %s (%s) on %s", from_code, to_code, travelType, date)
    if len(from_code) != 3 or len(to_code) != 3 or not from_code.isalpha() or not to_code.isalpha():
        raise HTTPException(status_code=400, detail="Invalid airport codes. Please select airports from suggestions.")

    flights = _find_flights(from_code, to_code, travelType, date)
    if not flights:
        raise HTTPException(status_code=404, detail="No flights available for this route. Please try different airports or dates.")

    if tripType == "round" and returnDate:
        return {"outbound": flights, "return": _find_flights(to_code, from_code, travelType, returnDate)}
    return flights


@router.post("/flights", status_code=201)
def add_flight(body: FlightIn, db: Session = Depends(get_db)):
    f = Flight(
        id=str(uuid.uuid4()),
        airline=body.airline,
        flight_number=body.flightNumber,
        from_label=body.from_,
        to_label=body.to,
        depart_time=body.departTime,
        arrive_time=body.arriveTime,
        duration=body.duration,
        price=body.price,
        travel_type=body.travelType,
    )
    db.add(f)
    db.commit()
    db.refresh(f)
    return _flight_out(f)
