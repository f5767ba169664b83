import os
import tempfile
import uuid
from decimal import Decimal
from pathlib import Path

# Settings are read at import time, so the environment goes first.
_db_file = Path(tempfile.mkstemp(prefix="skyreserve-test", suffix=".db")[1])
os.environ["DATABASE_URL"] = f"sqlite:///{_db_file}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["CANCELLATION_SCHEDULER_ENABLED"] = "false"
os.environ["AVIATION_STACK_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from skyreserve.db.session import Base, SessionLocal, engine, init_db
from skyreserve.models.booking import Booking, STATUS_CONFIRMED
from skyreserve.models.passenger import Passenger
from skyreserve.services.identifiers import generate_pnr


@pytest.fixture(autouse=True)
def _tables():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from skyreserve.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_booking(db):
    """Insert a booking row directly, bypassing the create path's price resolution."""
    def _make(pnr=None, last_name="Jones", total_price=Decimal("0"), **fields):
        fields.setdefault("status", STATUS_CONFIRMED)
        booking = Booking(
            id=str(uuid.uuid4()),
            pnr=pnr or generate_pnr(),
            total_price=total_price,
            **fields,
        )
        db.add(booking)
        db.add(Passenger(id=str(uuid.uuid4()), booking_id=booking.id, first_name="Alex", last_name=last_name))
        db.commit()
        db.refresh(booking)
        return booking
    return _make
