"""Simulated flight tracking. Positions are random; nothing here talks to a live feed."""
import random
import string
import time
from datetime import datetime, timedelta, timezone

TRACKED_AIRLINES = ("6E", "AI", "SG", "UK", "EK", "SQ", "BA")


def _position(rng, lat_range=(-90.0, 90.0), lon_range=(-180.0, 180.0)) -> dict:
    return {
        "altitude": rng.randint(10000, 44999),  # feet
        "speed": rng.randint(400, 899),         # mph
        "latitude": rng.uniform(*lat_range),
        "longitude": rng.uniform(*lon_range),
        "heading": rng.randint(0, 359),
    }


def _gate(rng) -> str:
    return f"{rng.choice(string.ascii_uppercase[:10])}{rng.randint(0, 49)}"


def get_flight_by_number(flight_number: str, rng: random.Random | None = None) -> dict | None:
    rng = rng or random
    flight_number = (flight_number or "").strip()
    if not flight_number:
        return None
    now = datetime.now(timezone.utc)
    return {
        "flightNumber": flight_number,
        "airline": flight_number.split(" ")[0],
        "status": "scheduled",
        "departure": {
            "airport": "DEL",
            "time": now.isoformat(),
            "terminal": rng.randint(1, 3),
            "gate": _gate(rng),
        },
        "arrival": {
            "airport": "BOM",
            "time": (now + timedelta(hours=2)).isoformat(),
            "terminal": rng.randint(1, 3),
            "gate": _gate(rng),
        },
        "aircraft": {
            "type": "A320",
            "registration": "VT-" + "".join(rng.choices(string.ascii_uppercase, k=2)),
        },
        "tracking": {**_position(rng), "lastUpdate": int(time.time() * 1000)},
    }


def get_flights_in_region(lamin: float, lomin: float, lamax: float, lomax: float,
                          count: int = 5, rng: random.Random | None = None) -> list[dict]:
    rng = rng or random
    lat_range = (min(lamin, lamax), max(lamin, lamax))
    lon_range = (min(lomin, lomax), max(lomin, lomax))
    flights = []
    for _ in range(count):
        flights.append({
            "callsign": f"{rng.choice(TRACKED_AIRLINES)}{rng.randint(1000, 9999)}",
            "status": "in-flight",
            **_position(rng, lat_range, lon_range),
            "timestamp": int(time.time() * 1000),
        })
    return flights
