import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from nilhub.core.config import get_settings
from nilhub.core.security import (
    decode_token,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


def test_verify_returns_the_issued_account_id():
    account_id = uuid.uuid4()
    token = issue_token(account_id)
    assert verify_token(token) == account_id


def test_token_only_carries_subject_and_expiry():
    token = issue_token(uuid.uuid4())
    claims = decode_token(token)
    assert set(claims) == {"sub", "exp"}


def test_default_lifetime_is_thirty_days():
    before = datetime.now(timezone.utc)
    claims = decode_token(issue_token(uuid.uuid4()))
    expected = before + timedelta(days=30)
    assert abs(claims["exp"] - expected.timestamp()) <= 5


def test_expired_token_is_rejected():
    token = issue_token(uuid.uuid4(), expires_delta=timedelta(seconds=-10))
    assert verify_token(token) is None
    with pytest.raises(ExpiredSignatureError):
        decode_token(token)


def test_token_signed_with_another_secret_is_rejected():
    settings = get_settings()
    token = jwt.encode({"sub": str(uuid.uuid4())}, "not-the-secret", algorithm=settings.JWT_ALG)
    assert verify_token(token) is None
    with pytest.raises(JWTError):
        decode_token(token)


def test_malformed_subject_is_rejected():
    settings = get_settings()
    token = jwt.encode({"sub": "not-a-uuid"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    assert verify_token(token) is None


def test_garbage_token_never_raises():
    assert verify_token("a.b.c") is None
    assert verify_token("") is None


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_with_invalid_hash_is_false():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_passwords_longer_than_72_bytes_are_truncated_consistently():
    long_password = "x" * 100
    hashed = hash_password(long_password)
    assert verify_password(long_password, hashed)
    assert verify_password("x" * 72, hashed)
