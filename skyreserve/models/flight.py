from decimal import Decimal
from sqlalchemy import String, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skyreserve.db.session import Base

class Flight(Base):
    __tablename__ = "flights"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    airline: Mapped[str] = mapped_column(String(80))
    flight_number: Mapped[str] = mapped_column(String(20), default="", index=True)
    from_label: Mapped[str] = mapped_column(String(120))
    to_label: Mapped[str] = mapped_column(String(120))
    depart_time: Mapped[str] = mapped_column(String(10))  # HH:MM
    arrive_time: Mapped[str] = mapped_column(String(10))  # HH:MM, may carry "+1"
    duration: Mapped[str] = mapped_column(String(10))     # e.g. "2h 15m"
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    travel_type: Mapped[str] = mapped_column(String(20))  # domestic, international
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
