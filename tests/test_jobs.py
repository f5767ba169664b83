import logging
import threading
from datetime import datetime, timedelta, timezone

from skyreserve.core.errors import PersistenceError, SchemaDriftError
from skyreserve.db.session import engine
from skyreserve.models.booking import Booking, CANCELLED, PENDING_CANCELLATION, STATUS_CANCELLED
from skyreserve.tasks import worker_jobs
from skyreserve.tasks.scheduler import CancellationScheduler

NOW = datetime(2026, 5, 10, 12, 0, tzinfo=timezone.utc)


def _pending(make_booking, due_in):
    return make_booking(
        status=STATUS_CANCELLED,
        cancellation_status=PENDING_CANCELLATION,
        cancellation_date=NOW - timedelta(days=5),
        expected_refund_date=NOW + due_in,
    )


def test_check_cancellations_advances_due_bookings(db, make_booking):
    due = _pending(make_booking, timedelta(hours=-1))
    later = _pending(make_booking, timedelta(days=1))

    assert worker_jobs.check_cancellations(now=NOW) == {"updated": 1}

    db.refresh(due)
    db.refresh(later)
    assert due.cancellation_status == CANCELLED
    assert later.cancellation_status == PENDING_CANCELLATION


def test_check_cancellations_skips_on_missing_table(caplog):
    Booking.__table__.drop(engine)

    with caplog.at_level(logging.WARNING, logger="skyreserve.tasks.worker_jobs"):
        result = worker_jobs.check_cancellations(now=NOW)

    assert result == {"skipped": True, "reason": "schema_drift"}
    assert any(r.levelno == logging.WARNING for r in caplog.records)
    assert not any(r.levelno >= logging.ERROR for r in caplog.records)


def test_check_cancellations_swallows_store_outage(monkeypatch, caplog):
    def outage(db, now=None):
        raise PersistenceError("connection refused")

    monkeypatch.setattr(worker_jobs, "reconcile_pending", outage)

    with caplog.at_level(logging.ERROR, logger="skyreserve.tasks.worker_jobs"):
        result = worker_jobs.check_cancellations(now=NOW)

    assert result == {"skipped": True, "reason": "store_error"}
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_schema_drift_is_not_logged_as_error(monkeypatch, caplog):
    def drift(db, now=None):
        raise SchemaDriftError("no such column: bookings.version")

    monkeypatch.setattr(worker_jobs, "reconcile_pending", drift)

    with caplog.at_level(logging.DEBUG, logger="skyreserve.tasks.worker_jobs"):
        assert worker_jobs.check_cancellations()["reason"] == "schema_drift"
    assert [r.levelno for r in caplog.records] == [logging.WARNING]


def test_scheduler_runs_immediately_and_start_is_idempotent():
    ran = threading.Event()
    calls = []

    def job():
        calls.append(1)
        ran.set()
        return {"updated": 0}

    scheduler = CancellationScheduler(job=job, interval_seconds=3600)
    try:
        assert scheduler.start() is True
        assert ran.wait(5)
        assert scheduler.start() is False
        assert scheduler.running
    finally:
        scheduler.stop()

    assert not scheduler.running
    assert len(calls) == 1


def test_scheduler_repeats_on_interval_and_survives_job_errors():
    three_runs = threading.Event()
    calls = []

    def job():
        calls.append(1)
        if len(calls) >= 3:
            three_runs.set()
        raise RuntimeError("boom")

    scheduler = CancellationScheduler(job=job, interval_seconds=0.01)
    try:
        scheduler.start()
        assert three_runs.wait(5)
    finally:
        scheduler.stop()
    assert scheduler.runs >= 3


def test_scheduler_can_restart_after_stop():
    ran = threading.Event()
    scheduler = CancellationScheduler(job=lambda: ran.set() or {}, interval_seconds=3600)

    scheduler.start()
    assert ran.wait(5)
    scheduler.stop()

    ran.clear()
    assert scheduler.start() is True
    assert ran.wait(5)
    scheduler.stop()


def test_celery_task_delegates_to_worker_job(monkeypatch):
    from skyreserve.tasks import jobs

    monkeypatch.setattr(jobs.worker_jobs, "check_cancellations", lambda: {"updated": 3})

    assert jobs.check_cancellations.apply().get() == {"updated": 3}
