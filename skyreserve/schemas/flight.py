from pydantic import BaseModel, ConfigDict, Field

class FlightIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    airline: str
    flightNumber: str = ""
    from_: str = Field(alias="from", description="Origin label, e.g. Delhi (DEL)")
    to: str
    departTime: str
    arriveTime: str
    duration: str
    price: float = Field(ge=0)
    travelType: str  # domestic | international
