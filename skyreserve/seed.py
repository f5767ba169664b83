import logging
import uuid

from sqlalchemy.orm import Session

from skyreserve.db.session import SessionLocal
from skyreserve.core.security import hash_password
from skyreserve.models.user import User
from skyreserve.models.flight import Flight

logger = logging.getLogger(__name__)

DEMO_FLIGHTS = [
    ("IndiGo", "6E 204", "Delhi (DEL)", "Mumbai (BOM)", "06:10", "08:20", "2h 10m", 5400, "domestic"),
    ("Air India", "AI 503", "Bengaluru (BLR)", "Kolkata (CCU)", "09:45", "12:20", "2h 35m", 6850, "domestic"),
    ("Emirates", "EK 511", "Delhi (DEL)", "Dubai (DXB)", "04:15", "06:35", "3h 50m", 420, "international"),
    ("Singapore Airlines", "SQ 403", "Delhi (DEL)", "Singapore (SIN)", "23:05", "07:20 +1", "5h 45m", 610, "international"),
]


def ensure_user(db: Session, email: str, password: str, role: str, name: str):
    u = db.query(User).filter(User.email == email).first()
    if u:
        return
    db.add(
        User(
            id=str(uuid.uuid4()),
            email=email,
            full_name=name,
            role=role,
            password_hash=hash_password(password),
            is_active=True,
        )
    )
    db.commit()


def run(db=None):
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        ensure_user(db, "admin@skyreserve.local", "admin12345", "admin", "Admin")

        if db.query(Flight.id).first() is None:
            for airline, number, frm, to, dep, arr, dur, price, travel_type in DEMO_FLIGHTS:
                db.add(Flight(
                    id=str(uuid.uuid4()),
                    airline=airline,
                    flight_number=number,
                    from_label=frm,
                    to_label=to,
                    depart_time=dep,
                    arrive_time=arr,
                    duration=dur,
                    price=price,
                    travel_type=travel_type,
                ))
            db.commit()
            logger.info("Seeded %d demo flights", len(DEMO_FLIGHTS))
    finally:
        if own_session:
            db.close()
