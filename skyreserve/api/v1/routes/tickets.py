from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from skyreserve.db.session import get_db
from skyreserve.api.deps import http_error
from skyreserve.core.errors import SkyReserveError
from skyreserve.models.support_ticket import SupportTicket
from skyreserve.schemas.ticket import TicketCreate, TicketStatusUpdate
from skyreserve.services import ticket_service

router = APIRouter(tags=["tickets"])


@router.get("/tickets")
def list_tickets(userId: str | None = None, db: Session = Depends(get_db)):
    if not userId:
        raise HTTPException(status_code=400, detail="User ID is required")
    items = (
        db.query(SupportTicket)
        .filter(SupportTicket.user_id == userId)
        .order_by(SupportTicket.created_at.desc())
        .all()
    )
    return [ticket_service.ticket_to_dict(db, t) for t in items]


@router.get("/tickets/{ticket_number}")
def get_ticket(ticket_number: str, db: Session = Depends(get_db)):
    t = db.query(SupportTicket).filter(SupportTicket.ticket_number == ticket_number).first()
    if not t:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket_service.ticket_to_dict(db, t)


@router.post("/tickets", status_code=201)
def create_ticket(body: TicketCreate, db: Session = Depends(get_db)):
    if not all([body.userId, body.name, body.email, body.subject, body.message]):
        raise HTTPException(status_code=400, detail="All fields are required")
    try:
        ticket = ticket_service.create_ticket(db, body.userId, body.subject, body.message)
    except SkyReserveError as e:
        raise http_error(e)
    return ticket_service.ticket_to_dict(db, ticket)


@router.patch("/tickets/{ticket_id}/status")
def update_ticket_status(ticket_id: str, body: TicketStatusUpdate, db: Session = Depends(get_db)):
    try:
        ticket = ticket_service.update_ticket_status(db, ticket_id, body.status, body.response)
    except SkyReserveError as e:
        raise http_error(e)
    return ticket_service.ticket_to_dict(db, ticket)
