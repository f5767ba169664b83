import logging
import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from skyreserve.core.errors import ConflictError, NotFoundError, ValidationError
from skyreserve.models.support_ticket import SupportTicket, TICKET_STATUSES
from skyreserve.models.user import User
from skyreserve.services.identifiers import allocate_ticket_number

logger = logging.getLogger(__name__)


def create_ticket(db: Session, user_id: str, subject: str, message: str) -> SupportTicket:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    ticket = SupportTicket(
        id=str(uuid.uuid4()),
        ticket_number=allocate_ticket_number(db),
        user_id=user.id,
        subject=subject,
        message=message,
        status="open",
        priority="medium",
    )
    db.add(ticket)
    try:
        db.commit()
    except IntegrityError as e:
        # lost a race for the same number between the check and the insert
        db.rollback()
        raise ConflictError("ticket number collision, retry") from e
    db.refresh(ticket)
    logger.info("Support ticket %s opened for user %s", ticket.ticket_number, user.id)
    return ticket


def update_ticket_status(db: Session, ticket_id: str, status: str | None = None, response: str | None = None) -> SupportTicket:
    ticket = db.get(SupportTicket, ticket_id)
    if not ticket:
        raise NotFoundError("Ticket not found")
    if status:
        if status not in TICKET_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(TICKET_STATUSES)}")
        ticket.status = status
    if response:
        ticket.response = response
        ticket.response_date = datetime.now(timezone.utc)
    db.commit()
    db.refresh(ticket)
    return ticket


def ticket_to_dict(db: Session, t: SupportTicket) -> dict:
    user = db.get(User, t.user_id) if t.user_id else None
    return {
        "id": t.id,
        "ticketNumber": t.ticket_number,
        "userId": t.user_id,
        "subject": t.subject,
        "message": t.message,
        "status": t.status,
        "priority": t.priority,
        "response": t.response,
        "responseDate": t.response_date.isoformat() if t.response_date else None,
        "createdAt": t.created_at.isoformat() if t.created_at else None,
        "user": {"id": user.id, "fullName": user.full_name, "email": user.email} if user else None,
    }
