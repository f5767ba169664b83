from pydantic import BaseModel
from typing import Optional

class RegisterRequest(BaseModel):
    fullName: Optional[str] = ""
    email: Optional[str] = ""  # plain str to allow .local and other dev domains
    mobile: Optional[str] = ""
    password: Optional[str] = ""

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

class UserOut(BaseModel):
    id: str
    fullName: str
    email: str
    mobile: str
