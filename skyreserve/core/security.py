from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from skyreserve.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGO = "HS256"
TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """False for missing or malformed hashes instead of raising."""
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(user_id: str, role: str = "customer", expires_minutes: int | None = None) -> str:
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    claims = {
        "sub": user_id,
        "role": role,
        "type": TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGO)


def decode_access_token(token: str) -> dict:
    """Raises JWTError for bad signatures, expired tokens and non-access tokens."""
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])
    if claims.get("type") != TOKEN_TYPE or not claims.get("sub"):
        raise JWTError("not an access token")
    return claims
