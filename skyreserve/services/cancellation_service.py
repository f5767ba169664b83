"""Booking cancellation lifecycle.

A booking moves ``None -> pending_cancellation -> cancelled`` and never back.
``request_cancellation`` prices the cancellation and opens the refund window;
``reconcile_booking`` closes it once ``expected_refund_date`` has passed. Both
writes are conditional UPDATEs guarded on the current ``cancellation_status``
and bump ``Booking.version``, so concurrent callers cannot apply the same
transition twice.

The HTTP ``check-cancellations`` endpoint, the in-process scheduler and the
Celery beat task all go through ``reconcile_pending``.
"""
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Callable

from sqlalchemy import func, update
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import Session

from skyreserve.core.config import settings
from skyreserve.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    SchemaDriftError,
    ValidationError,
)
from skyreserve.models.booking import Booking, CANCELLED, PENDING_CANCELLATION, STATUS_CANCELLED
from skyreserve.models.flight import Flight
from skyreserve.models.passenger import Passenger

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
SCHEMA_DRIFT_MARKERS = ("no such column", "no such table", "does not exist", "unknown column")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _random_refund_window() -> int:
    return random.randint(settings.REFUND_WINDOW_MIN_DAYS, settings.REFUND_WINDOW_MAX_DAYS)


@dataclass(frozen=True)
class CancellationPolicy:
    charge_rate: Decimal = Decimal("0.30")
    refund_window_days: Callable[[], int] = _random_refund_window
    clock: Callable[[], datetime] = utcnow

    @classmethod
    def from_settings(cls) -> "CancellationPolicy":
        return cls(charge_rate=Decimal(str(settings.CANCELLATION_CHARGE_RATE)))


@dataclass(frozen=True)
class CancellationQuote:
    total_price: Decimal
    cancellation_charges: Decimal
    refund_amount: Decimal
    days_until_refund: int
    cancellation_date: datetime
    expected_refund_date: datetime

    @property
    def message(self) -> str:
        return (
            "Your booking will be cancelled. "
            f"Refunds will be processed in {self.days_until_refund} business days."
        )


def to_money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return Decimal("0.00")
    if not amount.is_finite() or amount < 0:
        return Decimal("0.00")
    return amount.quantize(CENT, ROUND_HALF_UP)


def resolve_total_price(booking: Booking, flight: Flight | None = None) -> Decimal:
    """Stored price, else the embedded flight snapshot price, else the linked flight's price, else 0."""
    stored = to_money(booking.total_price)
    if stored > 0:
        return stored
    snapshot = booking.flight_data if isinstance(booking.flight_data, dict) else {}
    snapshot_price = to_money(snapshot.get("price"))
    if snapshot_price > 0:
        return snapshot_price
    if flight is not None:
        return to_money(flight.price)
    return Decimal("0.00")


def quote_cancellation(total_price: Decimal, now: datetime, policy: CancellationPolicy) -> CancellationQuote:
    total = to_money(total_price)
    charges = (total * policy.charge_rate).quantize(CENT, ROUND_HALF_UP)
    # refund takes the remainder so charges + refund == total exactly
    refund = total - charges
    days = int(policy.refund_window_days())
    now = as_utc(now)
    return CancellationQuote(
        total_price=total,
        cancellation_charges=charges,
        refund_amount=refund,
        days_until_refund=days,
        cancellation_date=now,
        expected_refund_date=now + timedelta(days=days),
    )


def is_due(booking: Booking, now: datetime) -> bool:
    return (
        booking.cancellation_status == PENDING_CANCELLATION
        and booking.expected_refund_date is not None
        and as_utc(booking.expected_refund_date) <= as_utc(now)
    )


def classify_store_error(exc: SQLAlchemyError) -> PersistenceError:
    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, (OperationalError, ProgrammingError)) and any(m in detail.lower() for m in SCHEMA_DRIFT_MARKERS):
        return SchemaDriftError(detail)
    return PersistenceError(detail)


def request_cancellation(
    db: Session,
    booking_id: str,
    now: datetime | None = None,
    policy: CancellationPolicy | None = None,
) -> tuple[Booking, CancellationQuote]:
    policy = policy or CancellationPolicy.from_settings()
    now = as_utc(now or policy.clock())

    try:
        booking = db.get(Booking, booking_id)
        flight = db.get(Flight, booking.flight_id) if booking and booking.flight_id else None
    except SQLAlchemyError as e:
        db.rollback()
        raise classify_store_error(e) from e
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.cancellation_status is not None:
        raise ConflictError(f"Booking {booking.pnr} is already {booking.cancellation_status}")

    quote = quote_cancellation(resolve_total_price(booking, flight), now, policy)

    try:
        result = db.execute(
            update(Booking)
            .where(Booking.id == booking.id, Booking.cancellation_status.is_(None))
            .values(
                status=STATUS_CANCELLED,
                cancellation_status=PENDING_CANCELLATION,
                cancellation_date=quote.cancellation_date,
                expected_refund_date=quote.expected_refund_date,
                total_price=quote.total_price,
                cancellation_charges=quote.cancellation_charges,
                refund_amount=quote.refund_amount,
                version=Booking.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            raise ConflictError(f"Booking {booking_id} was cancelled concurrently")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise classify_store_error(e) from e

    db.refresh(booking)
    logger.info(
        "Cancellation requested for booking %s: charges=%s refund=%s due=%s",
        booking.pnr, quote.cancellation_charges, quote.refund_amount, quote.expected_refund_date.isoformat(),
    )
    return booking, quote


def reconcile_booking(db: Session, booking: Booking, now: datetime) -> bool:
    """Finalize one pending cancellation if its refund date has passed.

    Returns True only for the call that actually moved the booking to
    ``cancelled``; not-yet-due bookings and bookings another writer already
    advanced are no-ops. Store errors propagate to the caller.
    """
    if not is_due(booking, now):
        return False
    pnr = booking.pnr
    now = as_utc(now)
    result = db.execute(
        update(Booking)
        .where(Booking.id == booking.id, Booking.cancellation_status == PENDING_CANCELLATION)
        .values(
            cancellation_status=CANCELLED,
            refund_completed_date=now,
            version=Booking.version + 1,
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount != 1:
        logger.debug("Booking %s already reconciled by another writer", pnr)
        return False
    logger.info("Updated booking %s to cancelled status with refund.", pnr)
    return True


def reconcile_pending(db: Session, now: datetime | None = None) -> int:
    """Advance every due pending cancellation; returns how many were advanced.

    A failure on one booking is rolled back and logged; the scan continues.
    A failure loading the batch raises SchemaDriftError or PersistenceError.
    """
    now = as_utc(now or utcnow())
    try:
        pending = db.query(Booking).filter(Booking.cancellation_status == PENDING_CANCELLATION).all()
    except SQLAlchemyError as e:
        db.rollback()
        raise classify_store_error(e) from e

    updated = 0
    for booking_id, booking in [(b.id, b) for b in pending]:
        try:
            if reconcile_booking(db, booking, now):
                updated += 1
        except SQLAlchemyError as e:
            db.rollback()
            error = classify_store_error(e)
            if isinstance(error, SchemaDriftError):
                logger.warning("Skipping booking %s, schema out of date: %s", booking_id, error)
            else:
                logger.exception("Failed to reconcile cancellation for booking %s", booking_id)

    if updated:
        logger.info("Updated %d booking(s) to cancelled status.", updated)
    return updated


def check_status(db: Session, pnr: str | None, last_name: str | None) -> Booking:
    pnr = (pnr or "").strip()
    last_name = (last_name or "").strip()
    if not pnr or not last_name:
        raise ValidationError("PNR and last name are required")

    try:
        booking = db.query(Booking).filter(func.upper(Booking.pnr) == pnr.upper()).first()
        passengers = db.query(Passenger).filter(Passenger.booking_id == booking.id).all() if booking else []
    except SQLAlchemyError as e:
        db.rollback()
        raise classify_store_error(e) from e
    if not booking:
        logger.info("Cancellation check: no booking for PNR %s", pnr.upper())
        raise NotFoundError("Booking not found with the provided PNR")

    if not any((p.last_name or "").strip().upper() == last_name.upper() for p in passengers):
        raise ForbiddenError("Last name does not match the booking")
    return booking
