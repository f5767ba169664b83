from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skyreserve.db.session import Base

# Booking.status
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

# Booking.cancellation_status; None means no cancellation requested
PENDING_CANCELLATION = "pending_cancellation"
CANCELLED = "cancelled"
REFUNDED = "refunded"

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    pnr: Mapped[str] = mapped_column(String(6), unique=True, index=True)

    user_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    flight_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)

    addons: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    seats: Mapped[list | None] = mapped_column(JSON, nullable=True)
    flight_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # flight snapshot at booking time
    payment_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=STATUS_CONFIRMED)  # confirmed, cancelled
    cancellation_status: Mapped[str | None] = mapped_column(String(30), index=True, nullable=True)
    cancellation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expected_refund_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    refund_completed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    cancellation_charges: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    refund_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    # bumped on every cancellation state write
    version: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
