import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from skyreserve.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    SchemaDriftError,
    ValidationError,
)
from skyreserve.db.session import SessionLocal
from skyreserve.models.booking import Booking, CANCELLED, PENDING_CANCELLATION, STATUS_CANCELLED
from skyreserve.models.flight import Flight
from skyreserve.services import cancellation_service
from skyreserve.services.cancellation_service import (
    CancellationPolicy,
    as_utc,
    check_status,
    classify_store_error,
    quote_cancellation,
    reconcile_booking,
    reconcile_pending,
    request_cancellation,
)

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def fixed_policy(days=5, now=NOW):
    return CancellationPolicy(refund_window_days=lambda: days, clock=lambda: now)


def test_cancel_splits_total_into_charges_and_refund(db, make_booking):
    booking = make_booking(total_price=Decimal("10000"))

    booking, quote = request_cancellation(db, booking.id, policy=fixed_policy())

    assert booking.status == STATUS_CANCELLED
    assert booking.cancellation_status == PENDING_CANCELLATION
    assert booking.cancellation_charges == Decimal("3000.00")
    assert booking.refund_amount == Decimal("7000.00")
    assert booking.cancellation_charges + booking.refund_amount == booking.total_price
    assert as_utc(booking.cancellation_date) == NOW
    assert as_utc(booking.expected_refund_date) == NOW + timedelta(days=5)
    assert booking.refund_completed_date is None
    assert quote.message == "Your booking will be cancelled. Refunds will be processed in 5 business days."


def test_expected_refund_date_stays_inside_window(db, make_booking):
    policy = CancellationPolicy(clock=lambda: NOW)  # random 4-7 day window
    for _ in range(12):
        booking = make_booking(total_price=Decimal("250"))
        booking, quote = request_cancellation(db, booking.id, policy=policy)
        start = as_utc(booking.cancellation_date)
        assert start + timedelta(days=4) <= as_utc(booking.expected_refund_date) <= start + timedelta(days=7)
        assert 4 <= quote.days_until_refund <= 7


def test_price_falls_back_to_flight_snapshot(db, make_booking):
    booking = make_booking(total_price=None, flight_data={"price": 5000, "airline": "IndiGo"})

    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy())

    assert booking.total_price == Decimal("5000.00")
    assert booking.cancellation_charges == Decimal("1500.00")
    assert booking.refund_amount == Decimal("3500.00")


def test_price_falls_back_to_linked_flight(db, make_booking):
    flight = Flight(
        id=str(uuid.uuid4()), airline="Air India", flight_number="AI 101", from_label="Delhi (DEL)",
        to_label="Mumbai (BOM)", depart_time="07:00", arrive_time="09:10", duration="2h 10m",
        price=Decimal("4200"), travel_type="domestic",
    )
    db.add(flight)
    db.commit()
    booking = make_booking(flight_id=flight.id)

    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy())

    assert booking.total_price == Decimal("4200.00")
    assert booking.cancellation_charges == Decimal("1260.00")
    assert booking.refund_amount == Decimal("2940.00")


def test_booking_without_any_price_cancels_at_zero(db, make_booking):
    booking = make_booking()

    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy())

    assert booking.total_price == 0
    assert booking.cancellation_charges == 0
    assert booking.refund_amount == 0


def test_quote_keeps_charges_plus_refund_equal_to_total():
    for total in ("999.99", "0.05", "1234.57", "10000"):
        quote = quote_cancellation(Decimal(total), NOW, fixed_policy())
        assert quote.cancellation_charges + quote.refund_amount == Decimal(total)
    assert quote_cancellation(Decimal("999.99"), NOW, fixed_policy()).cancellation_charges == Decimal("300.00")


def test_cancel_unknown_booking(db):
    with pytest.raises(NotFoundError):
        request_cancellation(db, str(uuid.uuid4()), policy=fixed_policy())


def test_second_cancellation_is_rejected(db, make_booking):
    booking = make_booking(total_price=Decimal("800"))
    request_cancellation(db, booking.id, policy=fixed_policy(days=4))

    with pytest.raises(ConflictError):
        request_cancellation(db, booking.id, policy=fixed_policy(days=7, now=NOW + timedelta(hours=1)))

    db.refresh(booking)
    assert booking.cancellation_status == PENDING_CANCELLATION
    assert as_utc(booking.expected_refund_date) == NOW + timedelta(days=4)


def test_concurrent_cancellations_apply_once(make_booking):
    booking_id = make_booking(total_price=Decimal("1000")).id
    first, second = SessionLocal(), SessionLocal()
    try:
        # both sessions see the booking before either writes
        assert first.get(Booking, booking_id).cancellation_status is None
        assert second.get(Booking, booking_id).cancellation_status is None

        request_cancellation(first, booking_id, policy=fixed_policy(days=4))
        with pytest.raises(ConflictError):
            request_cancellation(second, booking_id, policy=fixed_policy(days=7))

        second.expire_all()
        stored = second.get(Booking, booking_id)
        assert stored.version == 2
        assert as_utc(stored.expected_refund_date) == NOW + timedelta(days=4)
    finally:
        first.close()
        second.close()


def test_reconcile_is_noop_before_refund_date(db, make_booking):
    booking = make_booking(total_price=Decimal("10000"))
    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy(days=6))

    assert reconcile_booking(db, booking, NOW + timedelta(days=5, hours=23)) is False

    db.refresh(booking)
    assert booking.cancellation_status == PENDING_CANCELLATION
    assert booking.refund_completed_date is None


def test_reconcile_is_idempotent(db, make_booking):
    booking = make_booking(total_price=Decimal("640"))
    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy(days=4))
    due = NOW + timedelta(days=4)

    assert reconcile_booking(db, booking, due) is True
    db.refresh(booking)
    first_state = (booking.cancellation_status, booking.refund_completed_date, booking.version)

    assert reconcile_booking(db, booking, due + timedelta(hours=2)) is False
    db.refresh(booking)
    assert (booking.cancellation_status, booking.refund_completed_date, booking.version) == first_state
    assert booking.cancellation_status == CANCELLED
    assert as_utc(booking.refund_completed_date) == due


def test_domestic_booking_full_lifecycle(db, make_booking):
    booking = make_booking(total_price=Decimal("10000"), flight_data={"travelType": "domestic", "price": 10000})
    booking, _ = request_cancellation(db, booking.id, policy=fixed_policy(days=7))
    later = as_utc(booking.expected_refund_date) + timedelta(hours=1)

    assert reconcile_pending(db, later) == 1

    db.refresh(booking)
    assert booking.cancellation_status == CANCELLED
    assert as_utc(booking.refund_completed_date) == later
    assert booking.total_price == Decimal("10000.00")
    assert booking.cancellation_charges == Decimal("3000.00")
    assert booking.refund_amount == Decimal("7000.00")


def test_concurrent_reconcilers_refund_once(make_booking):
    booking = make_booking(
        total_price=Decimal("900"),
        status=STATUS_CANCELLED,
        cancellation_status=PENDING_CANCELLATION,
        cancellation_date=NOW - timedelta(days=5),
        expected_refund_date=NOW - timedelta(days=1),
    )
    first, second = SessionLocal(), SessionLocal()
    try:
        a = first.get(Booking, booking.id)
        b = second.get(Booking, booking.id)

        assert reconcile_booking(first, a, NOW) is True
        assert reconcile_booking(second, b, NOW + timedelta(minutes=1)) is False

        second.expire_all()
        stored = second.get(Booking, booking.id)
        assert stored.cancellation_status == CANCELLED
        assert as_utc(stored.refund_completed_date) == NOW
    finally:
        first.close()
        second.close()


def test_reconcile_pending_counts_only_due_bookings(db, make_booking):
    due = make_booking(status=STATUS_CANCELLED, cancellation_status=PENDING_CANCELLATION,
                       expected_refund_date=NOW - timedelta(minutes=1))
    not_due = make_booking(status=STATUS_CANCELLED, cancellation_status=PENDING_CANCELLATION,
                           expected_refund_date=NOW + timedelta(days=2))
    untouched = make_booking()

    assert reconcile_pending(db, NOW) == 1
    assert reconcile_pending(db, NOW) == 0

    for b in (due, not_due, untouched):
        db.refresh(b)
    assert due.cancellation_status == CANCELLED
    assert not_due.cancellation_status == PENDING_CANCELLATION
    assert untouched.cancellation_status is None


def test_reconcile_pending_isolates_failures(db, make_booking, monkeypatch):
    broken = make_booking(status=STATUS_CANCELLED, cancellation_status=PENDING_CANCELLATION,
                          expected_refund_date=NOW - timedelta(days=1))
    healthy = make_booking(status=STATUS_CANCELLED, cancellation_status=PENDING_CANCELLATION,
                           expected_refund_date=NOW - timedelta(days=1))
    original = cancellation_service.reconcile_booking

    def flaky(session, booking, now):
        if booking.id == broken.id:
            raise OperationalError("UPDATE bookings", {}, Exception("database is locked"))
        return original(session, booking, now)

    monkeypatch.setattr(cancellation_service, "reconcile_booking", flaky)

    assert reconcile_pending(db, NOW) == 1
    db.refresh(broken)
    db.refresh(healthy)
    assert broken.cancellation_status == PENDING_CANCELLATION
    assert healthy.cancellation_status == CANCELLED


def test_reconcile_pending_logs_drifted_booking_as_warning(db, make_booking, monkeypatch, caplog):
    make_booking(status=STATUS_CANCELLED, cancellation_status=PENDING_CANCELLATION,
                 expected_refund_date=NOW - timedelta(days=1))

    def drifted(session, booking, now):
        raise OperationalError("UPDATE bookings", {}, Exception("no such column: bookings.version"))

    monkeypatch.setattr(cancellation_service, "reconcile_booking", drifted)

    with caplog.at_level(logging.DEBUG, logger="skyreserve.services.cancellation_service"):
        assert reconcile_pending(db, NOW) == 0

    levels = [r.levelno for r in caplog.records if r.name == "skyreserve.services.cancellation_service"]
    assert levels == [logging.WARNING]


def _raise_locked(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_cancel_surfaces_store_failure_as_persistence_error(db, make_booking, monkeypatch):
    booking = make_booking(total_price=Decimal("900"))
    monkeypatch.setattr(db, "get", _raise_locked)

    with pytest.raises(PersistenceError):
        request_cancellation(db, booking.id, policy=fixed_policy())


def test_check_status_surfaces_store_failure_as_persistence_error(db, monkeypatch):
    monkeypatch.setattr(db, "query", _raise_locked)

    with pytest.raises(PersistenceError):
        check_status(db, "ABC123", "Jones")


def test_store_errors_are_classified():
    drift = classify_store_error(OperationalError("SELECT", {}, Exception("no such column: bookings.version")))
    outage = classify_store_error(OperationalError("SELECT", {}, Exception("unable to open database file")))

    assert isinstance(drift, SchemaDriftError)
    assert isinstance(outage, PersistenceError)
    assert not isinstance(outage, SchemaDriftError)


def test_check_status_requires_pnr_and_last_name(db):
    with pytest.raises(ValidationError):
        check_status(db, "ABC123", "")
    with pytest.raises(ValidationError):
        check_status(db, None, "Smith")


def test_check_status_unknown_pnr(db):
    with pytest.raises(NotFoundError):
        check_status(db, "ABC123", "Smith")


def test_check_status_wrong_last_name(db, make_booking):
    make_booking(pnr="ABC123", last_name="Jones")

    with pytest.raises(ForbiddenError):
        check_status(db, "ABC123", "Smith")


def test_check_status_is_case_insensitive(db, make_booking):
    booking = make_booking(pnr="ABC123", last_name="Jones")

    found = check_status(db, " abc123 ", "JONES")

    assert found.id == booking.id
