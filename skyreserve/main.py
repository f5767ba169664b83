from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skyreserve.core.config import settings
from skyreserve.core.logging import configure_logging
from skyreserve.api.v1.api import api_router
from skyreserve.db.session import init_db
from skyreserve.tasks.scheduler import scheduler

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    started = settings.CANCELLATION_SCHEDULER_ENABLED and scheduler.start()
    try:
        yield
    finally:
        if started:
            scheduler.stop()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS: use CORS_ORIGINS from env in production; default to localhost for dev
_default_origins = [
    "http://127.0.0.1:3000", "http://localhost:3000",
    "http://127.0.0.1:5173", "http://localhost:5173",
]
_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] if settings.CORS_ORIGINS else _default_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}
