from pydantic import BaseModel
from typing import Optional

class TicketCreate(BaseModel):
    userId: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

class TicketStatusUpdate(BaseModel):
    status: Optional[str] = None
    response: Optional[str] = None
