from fastapi import APIRouter
from skyreserve.api.v1.routes.users import router as users_router
from skyreserve.api.v1.routes.flights import router as flights_router
from skyreserve.api.v1.routes.bookings import router as bookings_router
from skyreserve.api.v1.routes.airports import router as airports_router
from skyreserve.api.v1.routes.tracking import router as tracking_router
from skyreserve.api.v1.routes.tickets import router as tickets_router

api_router = APIRouter(prefix="/api")
api_router.include_router(users_router)
api_router.include_router(flights_router)
api_router.include_router(bookings_router)
api_router.include_router(airports_router)
api_router.include_router(tracking_router)
api_router.include_router(tickets_router)
