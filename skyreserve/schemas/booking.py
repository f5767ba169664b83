from pydantic import BaseModel
from typing import List, Optional, Any

class PassengerIn(BaseModel):
    firstName: str = ""
    lastName: str
    phone: Optional[str] = ""
    gender: Optional[str] = ""
    dob: Optional[str] = ""
    nationality: Optional[str] = ""
    idType: Optional[str] = ""
    idNumber: Optional[str] = ""

class BookingCreate(BaseModel):
    pnr: Optional[str] = None  # generated server-side when omitted
    userId: Optional[str] = None
    flightId: Optional[str] = None
    passengers: List[PassengerIn]
    addons: Optional[Any] = None
    seats: Optional[Any] = None
    flightData: Optional[dict] = None
    paymentData: Optional[dict] = None
    totalPrice: Optional[float] = None

class CancellationCheckIn(BaseModel):
    # optional so missing values surface as 400, not 422
    pnr: Optional[str] = None
    lastName: Optional[str] = None
