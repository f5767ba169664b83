from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from skyreserve.db.session import get_db
from skyreserve.api.deps import http_error
from skyreserve.core.errors import SkyReserveError
from skyreserve.schemas.booking import BookingCreate, CancellationCheckIn
from skyreserve.services import booking_service, cancellation_service

router = APIRouter(tags=["bookings"])


@router.get("/bookings")
def list_bookings(userId: str | None = None, db: Session = Depends(get_db)):
    return [booking_service.booking_to_dict(db, b) for b in booking_service.list_bookings(db, userId)]


@router.post("/bookings", status_code=201)
def create_booking(body: BookingCreate, db: Session = Depends(get_db)):
    try:
        booking = booking_service.create_booking(
            db,
            passengers=[p.model_dump() for p in body.passengers],
            pnr=body.pnr,
            user_id=body.userId,
            flight_id=body.flightId,
            flight_data=body.flightData,
            addons=body.addons,
            seats=body.seats,
            payment_data=body.paymentData,
            total_price=body.totalPrice,
        )
    except SkyReserveError as e:
        raise http_error(e)
    return booking_service.booking_to_dict(db, booking)


@router.get("/bookings/check-cancellations")
def check_cancellations(db: Session = Depends(get_db)):
    """On-demand run of the same reconciliation the hourly job performs."""
    try:
        updated = cancellation_service.reconcile_pending(db)
    except SkyReserveError as e:
        raise HTTPException(status_code=500, detail=f"Failed to check cancellations: {e.message}")
    return {
        "message": f"Updated {updated} booking(s) to cancelled status.",
        "updatedCount": updated,
    }


@router.post("/bookings/check-cancellation")
def check_cancellation(body: Optional[CancellationCheckIn] = None, db: Session = Depends(get_db)):
    # an empty request body gets the same 400 as empty fields
    body = body or CancellationCheckIn()
    try:
        booking = cancellation_service.check_status(db, body.pnr, body.lastName)
    except SkyReserveError as e:
        raise http_error(e)
    return {
        **booking_service.booking_to_dict(db, booking),
        "message": "Cancellation status retrieved successfully",
    }


@router.get("/bookings/{pnr}")
def get_booking(pnr: str, db: Session = Depends(get_db)):
    b = booking_service.get_booking_by_pnr(db, pnr)
    if not b:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking_service.booking_to_dict(db, b)


@router.patch("/bookings/{booking_id}/cancel")
def cancel_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking, quote = cancellation_service.request_cancellation(db, booking_id)
    except SkyReserveError as e:
        raise http_error(e)
    return {
        **booking_service.booking_to_dict(db, booking),
        "message": quote.message,
    }
