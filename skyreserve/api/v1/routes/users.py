import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from skyreserve.db.session import get_db
from skyreserve.schemas.auth import LoginRequest, RegisterRequest, UserOut
from skyreserve.models.user import User
from skyreserve.core.security import hash_password, verify_password, create_access_token
from skyreserve.api.deps import get_current_user

router = APIRouter(tags=["users"])


def _user_out(user: User) -> dict:
    return UserOut(id=user.id, fullName=user.full_name or "", email=user.email, mobile=user.mobile or "").model_dump()


@router.post("/users/register", status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    if not (body.fullName and body.email and body.mobile and body.password):
        raise HTTPException(status_code=400, detail="All fields are required.")
    email = body.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email already registered.")
    user = User(
        id=str(uuid.uuid4()),
        email=email,
        full_name=body.fullName,
        mobile=body.mobile,
        role="customer",
        password_hash=hash_password(body.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    return {"message": "User registered successfully", "user": _user_out(user)}


@router.post("/users/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=400, detail="Invalid email or password.")
    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid email or password.")
    return {
        "message": "Login successful",
        "token": create_access_token(user.id, user.role),
        "user": _user_out(user),
    }


@router.get("/users/me")
def me(me: User = Depends(get_current_user)):
    """Return current user info including role."""
    return {**_user_out(me), "role": me.role}
