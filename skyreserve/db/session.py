from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from skyreserve.core.config import settings


class Base(DeclarativeBase):
    pass


def _connect_args(url: str) -> dict:
    # SQLite connections are shared between the request threadpool and the scheduler thread.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables. Existing tables are left untouched."""
    # Import all models so they are registered on Base.metadata
    from skyreserve.models import booking, flight, passenger, support_ticket, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
