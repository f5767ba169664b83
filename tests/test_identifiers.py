import random
import uuid

import pytest

from skyreserve.core.errors import IdentifierExhaustedError
from skyreserve.models.support_ticket import SupportTicket
from skyreserve.services.identifiers import (
    PNR_PATTERN,
    TICKET_NUMBER_PATTERN,
    allocate_pnr,
    allocate_ticket_number,
    generate_pnr,
    generate_ticket_number,
)


class ScriptedRandom:
    """randrange() replays the given values in order."""

    def __init__(self, *values):
        self._values = list(values)

    def randrange(self, stop):
        return self._values.pop(0)


def _ticket(db, number):
    db.add(SupportTicket(id=str(uuid.uuid4()), ticket_number=number, user_id="u1", subject="s", message="m"))
    db.commit()


def test_pnr_format():
    rng = random.Random(3)
    for _ in range(200):
        assert PNR_PATTERN.match(generate_pnr(rng))


def test_ticket_number_format_is_zero_padded():
    assert generate_ticket_number(ScriptedRandom(42)) == "TKT000042"
    assert generate_ticket_number(ScriptedRandom(999999)) == "TKT999999"
    assert TICKET_NUMBER_PATTERN.match(generate_ticket_number())


def test_ticket_number_regenerates_on_collision(db):
    _ticket(db, "TKT000001")

    number = allocate_ticket_number(db, ScriptedRandom(1, 1, 7))

    assert number == "TKT000007"


def test_ticket_number_gives_up_after_max_attempts(db):
    _ticket(db, "TKT000001")

    with pytest.raises(IdentifierExhaustedError):
        allocate_ticket_number(db, ScriptedRandom(1, 1, 1), max_attempts=3)


def test_allocate_pnr_skips_taken_codes(db, make_booking):
    taken = generate_pnr(random.Random(11))
    make_booking(pnr=taken)

    pnr = allocate_pnr(db, random.Random(11))

    assert pnr != taken
    assert PNR_PATTERN.match(pnr)
