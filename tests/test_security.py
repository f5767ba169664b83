import ssl
from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError, jwt

from skyreserve.core.config import settings
from skyreserve.core.security import (
    ALGO,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from skyreserve.tasks.celery_app import redis_ssl_options


def test_password_hash_round_trip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_rejects_missing_or_malformed_hash():
    assert not verify_password("s3cret-pass", None)
    assert not verify_password("s3cret-pass", "not-a-hash")
    assert not verify_password("", hash_password("x"))


def test_access_token_carries_user_and_role():
    claims = decode_access_token(create_access_token("user-1", "admin"))
    assert claims["sub"] == "user-1"
    assert claims["role"] == "admin"


def test_expired_token_is_rejected():
    with pytest.raises(JWTError):
        decode_access_token(create_access_token("user-1", expires_minutes=-1))


def test_non_access_token_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    refresh = jwt.encode({"sub": "user-1", "type": "refresh", "exp": exp}, settings.SECRET_KEY, algorithm=ALGO)
    with pytest.raises(JWTError):
        decode_access_token(refresh)


def test_redis_ssl_options():
    assert redis_ssl_options("redis://localhost:6379/0") is None
    assert redis_ssl_options("rediss://cache:6380/0") == {"ssl_cert_reqs": ssl.CERT_REQUIRED}
    assert redis_ssl_options("rediss://cache:6380/0", "None") == {"ssl_cert_reqs": ssl.CERT_NONE}
    with pytest.raises(ValueError):
        redis_ssl_options("rediss://cache:6380/0", "sometimes")
