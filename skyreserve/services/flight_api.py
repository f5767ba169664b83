"""Optional real-time flight source (AviationStack).

``get_realtime_flights`` returns a list of flight dicts in the same shape the
mock generator produces, or ``None`` whenever the source is not configured,
times out, errors, or has nothing for the route. Callers fall back to mock
flights on ``None``.
"""
import logging
import random
from datetime import datetime

import requests

from skyreserve.core.config import settings
from skyreserve.services import flight_generator
from skyreserve.services.airports import get_airport_by_code

logger = logging.getLogger(__name__)


def _is_domestic(from_code: str, to_code: str) -> bool:
    a, b = get_airport_by_code(from_code), get_airport_by_code(to_code)
    return bool(a and b and a["country"] == "India" and b["country"] == "India")


def _hhmm(ts: str | None) -> str:
    if not ts:
        return "00:00"
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).strftime("%H:%M")
    except ValueError:
        return "00:00"


def _duration(dep: str | None, arr: str | None) -> str:
    try:
        start = datetime.fromisoformat(dep.replace("Z", "+00:00"))
        end = datetime.fromisoformat(arr.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return "0h 0m"
    minutes = max(int((end - start).total_seconds() // 60), 0)
    return f"{minutes // 60}h {minutes % 60}m"


def _to_flight(item: dict, from_code: str, to_code: str, date: str, rng=None) -> dict:
    dep = item.get("departure") or {}
    arr = item.get("arrival") or {}
    info = item.get("flight") or {}
    airline = item.get("airline") or {}
    dep_code = dep.get("iata") or from_code
    arr_code = arr.get("iata") or to_code
    travel_type = flight_generator.DOMESTIC if _is_domestic(dep_code, arr_code) else flight_generator.INTERNATIONAL
    number = info.get("iata") or info.get("number") or "N/A"
    return {
        "id": number,
        "airline": airline.get("name") or "Unknown Airline",
        "flightNumber": number,
        "from": f"{dep.get('airport') or dep.get('city') or ''} ({dep_code})",
        "fromCode": dep_code,
        "to": f"{arr.get('airport') or arr.get('city') or ''} ({arr_code})",
        "toCode": arr_code,
        "departTime": _hhmm(dep.get("scheduled")),
        "arriveTime": _hhmm(arr.get("scheduled")),
        "duration": _duration(dep.get("scheduled"), arr.get("scheduled")),
        # the feed carries no fares
        "price": flight_generator.generate_price(travel_type, rng or random),
        "travelType": travel_type,
        "date": date,
        "status": item.get("flight_status") or "scheduled",
        "realTime": True,
    }


def get_realtime_flights(from_code: str, to_code: str, date: str) -> list[dict] | None:
    if not settings.AVIATION_STACK_API_KEY:
        return None
    flight_date = (date or "").split("T")[0].split(" ")[0]
    params = {
        "access_key": settings.AVIATION_STACK_API_KEY,
        "dep_iata": from_code,
        "arr_iata": to_code,
        "flight_date": flight_date,
    }
    try:
        r = requests.get(f"{settings.AVIATION_STACK_BASE_URL}/flights", params=params,
                         timeout=settings.AVIATION_STACK_TIMEOUT)
    except requests.RequestException as e:
        logger.warning("AviationStack request failed: %s", e)
        return None
    if r.status_code != 200:
        logger.warning("AviationStack returned status %s", r.status_code)
        return None
    try:
        data = r.json()
    except ValueError:
        logger.warning("AviationStack returned a non-JSON body")
        return None
    if not isinstance(data, dict):
        logger.warning("AviationStack returned an unexpected body")
        return None
    if data.get("error"):
        logger.warning("AviationStack error: %s", data["error"])
        return None
    items = data.get("data") or []
    if not items:
        return None
    logger.info("Using %d real-time flights from AviationStack for %s -> %s", len(items), from_code, to_code)
    return [_to_flight(item, from_code, to_code, flight_date) for item in items]
