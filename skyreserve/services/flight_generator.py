"""Mock flight inventory for searches that no real data source answers."""
import logging
import random
import re

from skyreserve.services.airports import get_airport_by_code

logger = logging.getLogger(__name__)

DOMESTIC = "domestic"
INTERNATIONAL = "international"

DOMESTIC_AIRLINES = [
    {"name": "IndiGo", "code": "6E", "logoBg": "bg-indigo-600"},
    {"name": "Air India", "code": "AI", "logoBg": "bg-red-600"},
    {"name": "SpiceJet", "code": "SG", "logoBg": "bg-orange-500"},
    {"name": "Vistara", "code": "UK", "logoBg": "bg-blue-700"},
    {"name": "GoAir", "code": "G8", "logoBg": "bg-cyan-500"},
    {"name": "AirAsia India", "code": "I5", "logoBg": "bg-red-500"},
]

INTERNATIONAL_AIRLINES = [
    {"name": "Emirates", "code": "EK", "logoBg": "bg-red-600"},
    {"name": "Singapore Airlines", "code": "SQ", "logoBg": "bg-blue-600"},
    {"name": "Qatar Airways", "code": "QR", "logoBg": "bg-purple-600"},
    {"name": "Etihad Airways", "code": "EY", "logoBg": "bg-amber-600"},
    {"name": "British Airways", "code": "BA", "logoBg": "bg-blue-800"},
    {"name": "Lufthansa", "code": "LH", "logoBg": "bg-yellow-600"},
    {"name": "Air France", "code": "AF", "logoBg": "bg-blue-500"},
    {"name": "Thai Airways", "code": "TG", "logoBg": "bg-purple-700"},
]

_CODE_IN_PARENS = re.compile(r"\(([A-Z]{3})\)")
_DURATION = re.compile(r"(\d+)h\s*(\d+)m")


def extract_airport_code(label: str) -> str:
    """``"Delhi (DEL)"`` -> ``"DEL"``; falls back to the last word of the label."""
    label = (label or "").strip()
    m = _CODE_IN_PARENS.search(label)
    if m:
        return m.group(1)
    if not label:
        return ""
    return label.split(" ")[-1].replace("(", "").replace(")", "").upper()


def generate_duration(travel_type: str, rng: random.Random) -> str:
    if travel_type == DOMESTIC:
        hours = rng.randint(1, 3)
    else:
        hours = rng.randint(4, 17)
    return f"{hours}h {rng.randint(0, 59)}m"


def generate_time(rng: random.Random) -> str:
    return f"{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}"


def arrival_time(depart: str, duration: str) -> str:
    m = _DURATION.match(duration or "")
    if not m:
        return "00:00"
    dh, dm = map(int, depart.split(":"))
    total = dh * 60 + dm + int(m.group(1)) * 60 + int(m.group(2))
    days, minutes = divmod(total, 1440)
    hh, mm = divmod(minutes, 60)
    out = f"{hh:02d}:{mm:02d}"
    return f"{out} +{days}" if days else out


def generate_price(travel_type: str, rng: random.Random) -> int:
    # domestic in INR, international in USD
    if travel_type == DOMESTIC:
        return rng.randint(2000, 14999)
    return rng.randint(300, 1499)


def generate_flights(from_code: str, to_code: str, travel_type: str, date: str,
                     rng: random.Random | None = None) -> list[dict]:
    rng = rng or random.Random()
    airlines = DOMESTIC_AIRLINES if travel_type == DOMESTIC else INTERNATIONAL_AIRLINES
    from_airport = get_airport_by_code(from_code)
    to_airport = get_airport_by_code(to_code)
    if not from_airport or not to_airport:
        logger.warning("Unknown airport in search %s -> %s; labelling with codes", from_code, to_code)
    from_city = from_airport["city"] if from_airport else from_code
    to_city = to_airport["city"] if to_airport else to_code

    flights = []
    for _ in range(rng.randint(3, 6)):
        airline = rng.choice(airlines)
        depart = generate_time(rng)
        duration = generate_duration(travel_type, rng)
        flights.append({
            "id": f"{airline['code']}{rng.randint(1000, 9999)}",
            "airline": airline["name"],
            "flightNumber": f"{airline['code']} {rng.randint(100, 999)}",
            "logoBg": airline["logoBg"],
            "from": f"{from_city} ({from_code})",
            "fromCode": from_code,
            "to": f"{to_city} ({to_code})",
            "toCode": to_code,
            "departTime": depart,
            "arriveTime": arrival_time(depart, duration),
            "duration": duration,
            "price": generate_price(travel_type, rng),
            "travelType": travel_type,
            "date": date,
        })
    flights.sort(key=lambda f: f["departTime"])
    logger.debug("Generated %d flights %s -> %s on %s", len(flights), from_code, to_code, date)
    return flights
