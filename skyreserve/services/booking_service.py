import logging
import uuid
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from skyreserve.core.errors import ConflictError, ValidationError
from skyreserve.models.booking import Booking, STATUS_CONFIRMED
from skyreserve.models.flight import Flight
from skyreserve.models.passenger import Passenger
from skyreserve.services.cancellation_service import resolve_total_price
from skyreserve.services.identifiers import PNR_PATTERN, allocate_pnr

logger = logging.getLogger(__name__)


def _iso(dt):
    return dt.isoformat() if dt else None


def _money_out(value) -> float:
    return float(value) if value is not None else 0.0


def create_booking(db: Session, *, passengers: list[dict], pnr: str | None = None, user_id: str | None = None,
                   flight_id: str | None = None, flight_data: dict | None = None, addons: dict | None = None,
                   seats: list | None = None, payment_data: dict | None = None, total_price=None) -> Booking:
    if not passengers:
        raise ValidationError("at least one passenger is required")

    if pnr:
        pnr = pnr.strip().upper()
        if not PNR_PATTERN.match(pnr):
            raise ValidationError("PNR must be 3 letters followed by 3 digits")
    else:
        pnr = allocate_pnr(db)

    flight = db.get(Flight, flight_id) if flight_id else None
    booking = Booking(
        id=str(uuid.uuid4()),
        pnr=pnr,
        user_id=user_id,
        flight_id=flight.id if flight else None,
        flight_data=flight_data,
        addons=addons,
        seats=seats,
        payment_data=payment_data,
        status=STATUS_CONFIRMED,
        cancellation_status=None,
        total_price=total_price,
    )
    # Same fallback chain the cancellation pricing uses
    booking.total_price = resolve_total_price(booking, flight)
    db.add(booking)

    for p in passengers:
        db.add(Passenger(
            id=str(uuid.uuid4()),
            booking_id=booking.id,
            first_name=p.get("firstName", "") or "",
            last_name=p.get("lastName", "") or "",
            gender=p.get("gender", "") or "",
            dob=p.get("dob", "") or "",
            nationality=p.get("nationality", "") or "",
            id_type=p.get("idType", "") or "",
            id_number=p.get("idNumber", "") or "",
            phone=p.get("phone", "") or "",
        ))

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # client-supplied PNRs are only guarded by the unique constraint
        raise ConflictError(f"PNR {pnr} is already in use") from e
    db.refresh(booking)
    logger.info("Booking %s created (total=%s)", booking.pnr, booking.total_price)
    return booking


def list_bookings(db: Session, user_id: str | None = None) -> list[Booking]:
    q = db.query(Booking)
    if user_id:
        q = q.filter(Booking.user_id == user_id)
    return q.order_by(Booking.created_at.desc()).all()


def get_booking_by_pnr(db: Session, pnr: str) -> Booking | None:
    return db.query(Booking).filter(Booking.pnr == pnr).first()


def booking_to_dict(db: Session, b: Booking) -> dict:
    pax = db.query(Passenger).filter(Passenger.booking_id == b.id).order_by(Passenger.created_at.asc()).all()
    flight = db.get(Flight, b.flight_id) if b.flight_id else None
    out = {
        "id": b.id,
        "pnr": b.pnr,
        "userId": b.user_id,
        "flightId": b.flight_id,
        "status": b.status,
        "cancellationStatus": b.cancellation_status,
        "cancellationDate": _iso(b.cancellation_date),
        "expectedRefundDate": _iso(b.expected_refund_date),
        "refundCompletedDate": _iso(b.refund_completed_date),
        "totalPrice": _money_out(b.total_price),
        "cancellationCharges": _money_out(b.cancellation_charges),
        "refundAmount": _money_out(b.refund_amount),
        "addons": b.addons,
        "seats": b.seats,
        "flightData": b.flight_data,
        "paymentData": b.payment_data,
        "createdAt": _iso(b.created_at),
        "passengers": [{
            "firstName": p.first_name,
            "lastName": p.last_name,
            "gender": p.gender,
            "dob": p.dob,
            "nationality": p.nationality,
            "idType": p.id_type,
            "idNumber": p.id_number,
            "phone": p.phone,
        } for p in pax],
    }
    if flight:
        out["flight"] = {
            "id": flight.id,
            "airline": flight.airline,
            "flightNumber": flight.flight_number,
            "from": flight.from_label,
            "to": flight.to_label,
            "departTime": flight.depart_time,
            "arriveTime": flight.arrive_time,
            "price": _money_out(flight.price),
            "travelType": flight.travel_type,
        }
    return out
