from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skyreserve.db.session import Base

TICKET_STATUSES = ("open", "in_progress", "resolved", "closed")

class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_number: Mapped[str] = mapped_column(String(9), unique=True, index=True)  # TKT000123
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    subject: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="open")      # open, in_progress, resolved, closed
    priority: Mapped[str] = mapped_column(String(10), default="medium")  # low, medium, high

    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
