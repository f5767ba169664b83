from fastapi import APIRouter
from skyreserve.services.airports import get_all_airports, search_airports

router = APIRouter(tags=["airports"])


@router.get("/airports/search")
def search(q: str = ""):
    """Autocomplete; at most 10 matches on code, city or name."""
    return search_airports(q, limit=10)


@router.get("/airports")
def list_airports():
    return get_all_airports()
