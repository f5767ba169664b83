import logging
import random
import re
import string

from sqlalchemy.orm import Session

from skyreserve.core.config import settings
from skyreserve.core.errors import IdentifierExhaustedError
from skyreserve.models.booking import Booking
from skyreserve.models.support_ticket import SupportTicket

logger = logging.getLogger(__name__)

TICKET_PREFIX = "TKT"
PNR_PATTERN = re.compile(r"^[A-Z]{3}[0-9]{3}$")
TICKET_NUMBER_PATTERN = re.compile(r"^TKT[0-9]{6}$")


def generate_pnr(rng: random.Random | None = None) -> str:
    """3 uppercase letters followed by 3 digits, e.g. ``QZT408``."""
    rng = rng or random
    return "".join(rng.choices(string.ascii_uppercase, k=3)) + "".join(rng.choices(string.digits, k=3))


def generate_ticket_number(rng: random.Random | None = None) -> str:
    rng = rng or random
    return f"{TICKET_PREFIX}{rng.randrange(1_000_000):06d}"


def allocate_pnr(db: Session, rng: random.Random | None = None, max_attempts: int | None = None) -> str:
    # pnr must be unique
    attempts = max_attempts or settings.PNR_MAX_ATTEMPTS
    for _ in range(attempts):
        pnr = generate_pnr(rng)
        exists = db.query(Booking.id).filter(Booking.pnr == pnr).first()
        if not exists:
            return pnr
        logger.debug("PNR %s already taken, regenerating", pnr)
    raise IdentifierExhaustedError(f"could not allocate a PNR after {attempts} attempts")


def allocate_ticket_number(db: Session, rng: random.Random | None = None, max_attempts: int | None = None) -> str:
    attempts = max_attempts or settings.TICKET_NUMBER_MAX_ATTEMPTS
    for _ in range(attempts):
        number = generate_ticket_number(rng)
        exists = db.query(SupportTicket.id).filter(SupportTicket.ticket_number == number).first()
        if not exists:
            return number
        logger.debug("Ticket number %s already taken, regenerating", number)
    raise IdentifierExhaustedError(f"could not allocate a ticket number after {attempts} attempts")
