"""Static airport directory used for search autocomplete and mock flight labels."""

AIRPORTS: list[dict] = [
    {"code": "DEL", "city": "Delhi", "name": "Indira Gandhi International Airport", "country": "India"},
    {"code": "BOM", "city": "Mumbai", "name": "Chhatrapati Shivaji Maharaj International Airport", "country": "India"},
    {"code": "BLR", "city": "Bengaluru", "name": "Kempegowda International Airport", "country": "India"},
    {"code": "MAA", "city": "Chennai", "name": "Chennai International Airport", "country": "India"},
    {"code": "CCU", "city": "Kolkata", "name": "Netaji Subhas Chandra Bose International Airport", "country": "India"},
    {"code": "HYD", "city": "Hyderabad", "name": "Rajiv Gandhi International Airport", "country": "India"},
    {"code": "COK", "city": "Kochi", "name": "Cochin International Airport", "country": "India"},
    {"code": "GOI", "city": "Goa", "name": "Dabolim Airport", "country": "India"},
    {"code": "AMD", "city": "Ahmedabad", "name": "Sardar Vallabhbhai Patel International Airport", "country": "India"},
    {"code": "PNQ", "city": "Pune", "name": "Pune Airport", "country": "India"},
    {"code": "JAI", "city": "Jaipur", "name": "Jaipur International Airport", "country": "India"},
    {"code": "DXB", "city": "Dubai", "name": "Dubai International Airport", "country": "United Arab Emirates"},
    {"code": "DOH", "city": "Doha", "name": "Hamad International Airport", "country": "Qatar"},
    {"code": "SIN", "city": "Singapore", "name": "Singapore Changi Airport", "country": "Singapore"},
    {"code": "BKK", "city": "Bangkok", "name": "Suvarnabhumi Airport", "country": "Thailand"},
    {"code": "LHR", "city": "London", "name": "Heathrow Airport", "country": "United Kingdom"},
    {"code": "CDG", "city": "Paris", "name": "Charles de Gaulle Airport", "country": "France"},
    {"code": "FRA", "city": "Frankfurt", "name": "Frankfurt Airport", "country": "Germany"},
    {"code": "JFK", "city": "New York", "name": "John F. Kennedy International Airport", "country": "United States"},
    {"code": "SFO", "city": "San Francisco", "name": "San Francisco International Airport", "country": "United States"},
    {"code": "AUH", "city": "Abu Dhabi", "name": "Abu Dhabi International Airport", "country": "United Arab Emirates"},
    {"code": "HND", "city": "Tokyo", "name": "Haneda Airport", "country": "Japan"},
]

_BY_CODE = {a["code"]: a for a in AIRPORTS}


def get_all_airports() -> list[dict]:
    return list(AIRPORTS)


def get_airport_by_code(code: str) -> dict | None:
    return _BY_CODE.get((code or "").strip().upper())


def search_airports(query: str, limit: int = 10) -> list[dict]:
    q = (query or "").strip().lower()
    if not q:
        return []
    exact = [a for a in AIRPORTS if a["code"].lower() == q]
    rest = [
        a for a in AIRPORTS
        if a not in exact and (q in a["code"].lower() or q in a["city"].lower() or q in a["name"].lower())
    ]
    return (exact + rest)[:limit]
